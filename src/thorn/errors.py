"""Custom exceptions for the thorn task runner."""

from __future__ import annotations


class ThornError(RuntimeError):
    """Base class for failures reported to the user as a single message."""


class ConfigurationError(ThornError):
    """Raised when environment configuration is invalid."""


class RegistryError(ThornError):
    """Raised when the persistence file of the module registry is unusable."""


class SourceNotFound(ThornError):
    """Raised when a local task file or directory cannot be read."""


class RemoteFetchFailed(ThornError):
    """Raised when a task file cannot be fetched from a URL."""


class AliasNotFound(ThornError):
    """Raised when uninstall or update names an unknown module."""


class UnknownTask(ThornError):
    """Raised when a task path does not resolve to a loaded task."""


class TaskExecutionError(ThornError):
    """Raised when a task fails while it is running."""


class LoadWarning(UserWarning):
    """Non-fatal failure to evaluate one task file."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"unable to load task file {path!r}: {message}")
        self.path = path
        self.message = message
