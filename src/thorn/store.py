"""Content-addressed storage of installed task files."""

from __future__ import annotations

import pathlib
import shutil
from typing import List

from .config import ENTRY_POINT


class ContentStore:
    """Stores installed task-file bodies under ``root`` keyed by their id.

    A single-file install is one file named after its id; a directory
    install is a copied tree whose entry point is ``main.thorn``.
    """

    def __init__(self, root: pathlib.Path) -> None:
        self._root = pathlib.Path(root)

    @property
    def root(self) -> pathlib.Path:
        return self._root

    def path_for(self, object_id: str) -> pathlib.Path:
        return self._root / object_id

    def ensure_root(self) -> pathlib.Path:
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    def put(self, object_id: str, content: str) -> pathlib.Path:
        """Write ``content`` as the object ``object_id``, replacing any previous one."""

        self.ensure_root()
        destination = self.path_for(object_id)
        if destination.is_dir():
            shutil.rmtree(destination)
        if not content.endswith("\n"):
            content += "\n"
        destination.write_text(content, encoding="utf-8")
        return destination

    def put_tree(self, object_id: str, source_dir: pathlib.Path) -> pathlib.Path:
        """Copy the directory ``source_dir`` as the object ``object_id``."""

        self.ensure_root()
        destination = self.path_for(object_id)
        self._discard(destination)
        shutil.copytree(pathlib.Path(source_dir), destination)
        return destination

    def remove(self, object_id: str) -> None:
        """Delete the object; a missing object is not an error."""

        self._discard(self.path_for(object_id))

    def exists(self, object_id: str) -> bool:
        return self.path_for(object_id).exists()

    def list_objects(self) -> List[pathlib.Path]:
        """Return the direct children of the root, directories mapped to their entry point."""

        if not self._root.is_dir():
            return []
        return [entry_point(child) for child in sorted(self._root.iterdir())]

    @staticmethod
    def _discard(path: pathlib.Path) -> None:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)


def entry_point(path: pathlib.Path) -> pathlib.Path:
    """Map a directory install to its ``main.thorn``; files are returned unchanged."""

    return path / ENTRY_POINT if path.is_dir() else path


__all__ = ["ContentStore", "entry_point"]
