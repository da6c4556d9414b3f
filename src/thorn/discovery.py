"""Locates task files installed system-wide and in the current project."""

from __future__ import annotations

import glob
import logging
import os
import pathlib
from typing import List, Optional

from .config import TASK_EXTENSION, TASKFILE_NAME
from .registry import Registry
from .store import ContentStore, entry_point

logger = logging.getLogger(__name__)


def globs_for(path: pathlib.Path) -> List[str]:
    """Return the task-file patterns tested at one directory level."""

    base = glob.escape(str(path))
    return [
        os.path.join(base, TASKFILE_NAME),
        os.path.join(base, f"*{TASK_EXTENSION}"),
        os.path.join(base, "tasks", f"*{TASK_EXTENSION}"),
        os.path.join(base, "lib", "tasks", f"*{TASK_EXTENSION}"),
    ]


class Discoverer:
    """Finds the task files a command should load.

    System-wide files come first so that project-local definitions, loaded
    later, replace groups of the same name.
    """

    def __init__(
        self,
        store: ContentStore,
        registry: Registry,
        *,
        cwd: Optional[pathlib.Path] = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._cwd = pathlib.Path(cwd) if cwd is not None else None

    def discover(self, relevant_to: Optional[str] = None) -> List[pathlib.Path]:
        """Return system-wide then project-local task files.

        With ``relevant_to`` set to a namespace identifier, only installed
        modules that declare it are included.
        """

        if relevant_to is None:
            files = self.system_files()
        else:
            files = self.relevant_files(relevant_to)
        files += [path for path in self.project_files() if not self._is_registry_file(path)]
        return [entry_point(path) for path in files]

    def system_files(self) -> List[pathlib.Path]:
        return [path for path in self._store.list_objects() if not self._is_registry_file(path)]

    def relevant_files(self, namespace_id: str) -> List[pathlib.Path]:
        return [
            entry_point(self._store.path_for(entry.stored_id))
            for entry in self._registry.relevant_to(namespace_id)
        ]

    def project_files(self) -> List[pathlib.Path]:
        """Search from the working directory upwards, stopping at the first level with matches.

        Starting in ``~/dev/app/src`` with a ``Thornfile`` in ``~/dev/app``,
        the search tests ``src``, finds nothing, moves to ``app`` and stops
        there; ``~/dev`` and above are never consulted.
        """

        start = self._cwd if self._cwd is not None else pathlib.Path.cwd()
        start = pathlib.Path(os.path.abspath(start))
        for directory in (start, *start.parents):
            matches: List[pathlib.Path] = []
            for pattern in globs_for(directory):
                matches.extend(pathlib.Path(match) for match in sorted(glob.glob(pattern)))
            if matches:
                logger.debug("Found %d task file(s) in %s", len(matches), directory)
                return matches
        return []

    def _is_registry_file(self, path: pathlib.Path) -> bool:
        return os.path.abspath(path) == os.path.abspath(self._registry.path)


__all__ = ["Discoverer", "globs_for"]
