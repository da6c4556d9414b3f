"""Task runner that discovers, installs and loads task files."""

from importlib import metadata

from .tasks.base import Tasks

__all__ = ["Tasks", "__version__"]


def __getattr__(name: str):
    if name == "__version__":
        return metadata.version("thorn")
    raise AttributeError(name)
