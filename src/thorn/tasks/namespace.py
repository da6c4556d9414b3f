"""Task namespace populated by the loader."""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import re
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from ..errors import TaskExecutionError, ThornError, UnknownTask
from ..util import constant_to_path
from .base import parse_arguments, summary_of, task_methods, usage_of

logger = logging.getLogger(__name__)

TaskHandler = Callable[..., Any]


@dataclasses.dataclass(slots=True)
class TaskDefinition:
    identifier: str
    name: str
    summary: str
    usage: str
    handler: TaskHandler
    owner: type

    def run(self, argv: Sequence[str] = ()) -> Any:
        args, kwargs = parse_arguments(self.identifier, self.handler, argv)
        instance = self.owner()
        try:
            return self.handler(instance, *args, **kwargs)
        except TaskExecutionError:
            raise
        except Exception as exc:
            raise TaskExecutionError(f"Task '{self.identifier}' failed: {exc}") from exc


@dataclasses.dataclass(slots=True)
class TaskGroup:
    """A ``Tasks`` subclass registered under its task path."""

    path: str
    constant: str
    cls: type
    source: Optional[pathlib.Path]
    group_name: str
    description: str
    tasks: Dict[str, TaskDefinition]

    @classmethod
    def from_class(cls, klass: type, source: Optional[pathlib.Path] = None) -> "TaskGroup":
        constant = klass.__qualname__
        path = constant_to_path(constant)
        tasks: Dict[str, TaskDefinition] = {}
        for name, func in task_methods(klass).items():
            identifier = f"{path}:{name}"
            tasks[name] = TaskDefinition(
                identifier=identifier,
                name=name,
                summary=summary_of(func),
                usage=usage_of(identifier, func),
                handler=func,
                owner=klass,
            )
        return cls(
            path=path,
            constant=constant,
            cls=klass,
            source=source,
            group_name=str(getattr(klass, "group", "standard")),
            description=summary_of(klass),
            tasks=tasks,
        )


class Namespace:
    """Book-keeping for loaded task groups.

    Groups are keyed by task path. Registering a group under a path that is
    already taken replaces the earlier group, so files loaded later win.
    """

    def __init__(self) -> None:
        self._groups: Dict[str, TaskGroup] = {}

    def register_group(self, klass: type, source: Optional[pathlib.Path] = None) -> TaskGroup:
        group = TaskGroup.from_class(klass, source)
        previous = self._groups.get(group.path)
        if previous is not None:
            logger.debug(
                "Task group '%s' from %s replaces the one from %s",
                group.path,
                source,
                previous.source,
            )
        self._groups[group.path] = group
        return group

    def get(self, identifier: str) -> TaskDefinition:
        group_path, _, name = identifier.rpartition(":")
        group = self._groups.get(group_path or "default")
        if group is None or name not in group.tasks:
            raise UnknownTask(f"Could not find task '{identifier}'")
        return group.tasks[name]

    def group(self, path: str) -> Optional[TaskGroup]:
        return self._groups.get(path)

    def find_groups(
        self,
        search: str = "",
        *,
        substring: bool = False,
        group: str = "standard",
        all_groups: bool = False,
    ) -> List[TaskGroup]:
        """Return groups whose path starts with ``search`` (anywhere with ``substring``)."""

        pattern = f".*{search}" if substring else search
        try:
            matcher = re.compile(f"^{pattern}.*", re.IGNORECASE)
        except re.error as exc:
            raise ThornError(f"Invalid search pattern '{search}': {exc}") from exc
        return [
            item
            for item in self._groups.values()
            if (all_groups or item.group_name == group) and matcher.match(item.path)
        ]

    def __contains__(self, identifier: str) -> bool:
        try:
            self.get(identifier)
        except UnknownTask:
            return False
        return True

    def __iter__(self) -> Iterator[TaskGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)


__all__ = ["Namespace", "TaskDefinition", "TaskGroup", "TaskHandler"]
