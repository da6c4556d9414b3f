"""Evaluates task files into the shared namespace, once per process."""

from __future__ import annotations

import hashlib
import logging
import os
import pathlib
import sys
import types
from typing import Iterable, List, Set

from .errors import LoadWarning
from .tasks.base import Tasks
from .tasks.namespace import Namespace, TaskGroup

logger = logging.getLogger(__name__)


class Loader:
    """Loads task files into ``namespace`` and remembers which ones it loaded.

    A file that fails to evaluate is reported as a warning and skipped; it is
    not marked as loaded, so a later discovery in the same process retries it.
    """

    def __init__(self, namespace: Namespace) -> None:
        self._namespace = namespace
        self._loaded: Set[pathlib.Path] = set()
        self.warnings: List[LoadWarning] = []

    @property
    def namespace(self) -> Namespace:
        return self._namespace

    @property
    def loaded_files(self) -> Set[pathlib.Path]:
        return set(self._loaded)

    def is_loaded(self, path: os.PathLike[str] | str) -> bool:
        return _absolute(path) in self._loaded

    def load_if_new(self, path: os.PathLike[str] | str) -> bool:
        """Load ``path`` unless it was already loaded; return whether it is loaded now."""

        absolute = _absolute(path)
        if absolute in self._loaded:
            return True

        try:
            self._evaluate(absolute)
        except (Exception, SystemExit) as exc:
            warning = LoadWarning(str(path), str(exc) or type(exc).__name__)
            self.warnings.append(warning)
            logger.warning("%s", warning)
            return False

        self._loaded.add(absolute)
        return True

    def load_all(self, paths: Iterable[os.PathLike[str] | str]) -> None:
        for path in paths:
            self.load_if_new(path)

    def _evaluate(self, path: pathlib.Path) -> List[TaskGroup]:
        source = path.read_text(encoding="utf-8")
        code = compile(source, str(path), "exec")

        module_name = "_thorn_taskfile_" + hashlib.md5(str(path).encode("utf-8")).hexdigest()
        module = types.ModuleType(module_name)
        module.__file__ = str(path)
        module.__dict__["Tasks"] = Tasks
        sys.modules[module_name] = module
        try:
            exec(code, module.__dict__)
            groups = [
                self._namespace.register_group(klass, path)
                for klass in _task_classes(vars(module).values(), module_name)
            ]
        except BaseException:
            sys.modules.pop(module_name, None)
            raise

        logger.debug("Loaded %d task group(s) from %s", len(groups), path)
        return groups


def _absolute(path: os.PathLike[str] | str) -> pathlib.Path:
    return pathlib.Path(os.path.abspath(os.path.expanduser(os.fspath(path))))


def _task_classes(values: Iterable[object], module_name: str) -> List[type]:
    """Return the ``Tasks`` subclasses defined in ``module_name``, nested ones included."""

    found: List[type] = []
    pending = [value for value in values if isinstance(value, type)]
    seen: Set[int] = set()
    while pending:
        klass = pending.pop(0)
        if id(klass) in seen or klass.__module__ != module_name:
            continue
        seen.add(id(klass))
        if issubclass(klass, Tasks) and klass is not Tasks:
            found.append(klass)
        pending.extend(value for value in vars(klass).values() if isinstance(value, type))
    return found


__all__ = ["Loader"]
