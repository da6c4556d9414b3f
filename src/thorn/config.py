"""Configuration utilities for the thorn task runner."""

from __future__ import annotations

import dataclasses
import logging
import os
import pathlib
from typing import Mapping, Optional

from .errors import ConfigurationError

STORE_DIRNAME = ".thorn"
REGISTRY_FILENAME = "thorn.yml"
TASKFILE_NAME = "Thornfile"
TASK_EXTENSION = ".thorn"
ENTRY_POINT = "main" + TASK_EXTENSION

ENV_PREFIX = "THORN"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def resolve_root(environ: Optional[Mapping[str, str]] = None) -> pathlib.Path:
    """Return the directory holding installed modules and ``thorn.yml``.

    The base directory is taken from ``HOME``, then ``HOMEDRIVE``/``HOMEPATH``,
    then ``APPDATA``, then whatever :meth:`pathlib.Path.home` can work out.
    When no home can be determined the filesystem root is used.
    """

    env = os.environ if environ is None else environ

    if env.get("HOME"):
        base = pathlib.Path(env["HOME"])
    elif env.get("HOMEDRIVE") and env.get("HOMEPATH"):
        base = pathlib.Path(env["HOMEDRIVE"] + env["HOMEPATH"])
    elif env.get("APPDATA"):
        base = pathlib.Path(env["APPDATA"])
    else:
        try:
            base = pathlib.Path.home()
        except (KeyError, RuntimeError):
            base = pathlib.Path("C:/" if os.altsep else "/")
    return base / STORE_DIRNAME


@dataclasses.dataclass(slots=True)
class Settings:
    """Runtime settings gathered from the environment."""

    root: pathlib.Path
    fetch_timeout: Optional[float] = None
    log_level: int = logging.INFO

    @property
    def registry_path(self) -> pathlib.Path:
        return self.root / REGISTRY_FILENAME

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        raw_root = env.get(_k("ROOT"), "").strip()
        root = pathlib.Path(raw_root).expanduser() if raw_root else resolve_root(env)

        raw_timeout = env.get(_k("FETCH_TIMEOUT"), "").strip()
        fetch_timeout: Optional[float] = None
        if raw_timeout:
            try:
                fetch_timeout = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{_k('FETCH_TIMEOUT')} must be a number of seconds, got {raw_timeout!r}"
                ) from exc
            if fetch_timeout <= 0:
                raise ConfigurationError(f"{_k('FETCH_TIMEOUT')} must be greater than zero")

        raw_level = env.get(_k("LOG_LEVEL"), "").strip().upper()
        log_level = logging.INFO
        if raw_level:
            level = logging.getLevelName(raw_level)
            if not isinstance(level, int):
                raise ConfigurationError(f"Unknown log level {raw_level!r} in {_k('LOG_LEVEL')}")
            log_level = level

        return cls(root=root, fetch_timeout=fetch_timeout, log_level=log_level)


__all__ = [
    "ENTRY_POINT",
    "REGISTRY_FILENAME",
    "STORE_DIRNAME",
    "Settings",
    "TASKFILE_NAME",
    "TASK_EXTENSION",
    "resolve_root",
]
