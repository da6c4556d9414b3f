"""Process-level coordinator for discovery, loading and dispatch."""

from __future__ import annotations

import pathlib
from typing import Any, List, Optional, Sequence

import httpx

from .config import Settings
from .discovery import Discoverer
from .lifecycle import LifecycleManager
from .loader import Loader
from .models import RegistryEntry
from .prompt import ConsolePrompter, Prompter
from .registry import Registry
from .store import ContentStore
from .tasks.namespace import Namespace, TaskDefinition, TaskGroup
from .util import namespace_of


class Runner:
    """Owns the registry, store, namespace and loader for one process."""

    def __init__(
        self,
        settings: Settings,
        *,
        prompter: Optional[Prompter] = None,
        client: Optional[httpx.Client] = None,
        cwd: Optional[pathlib.Path] = None,
    ) -> None:
        self._settings = settings
        self.store = ContentStore(settings.root)
        self.registry = Registry(settings.registry_path)
        self.namespace = Namespace()
        self.loader = Loader(self.namespace)
        self.discoverer = Discoverer(self.store, self.registry, cwd=cwd)
        self.lifecycle = LifecycleManager(
            self.store,
            self.registry,
            prompter or ConsolePrompter(),
            client=client,
            timeout=settings.fetch_timeout,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def initialize_task_files(self, relevant_to: Optional[str] = None) -> None:
        """Load the files that may define ``relevant_to``, or every file when it is ``None``."""

        namespace_id = namespace_of(relevant_to) if relevant_to else None
        self.loader.load_all(self.discoverer.discover(namespace_id))

    def find_task(self, identifier: str) -> TaskDefinition:
        self.initialize_task_files(identifier)
        return self.namespace.get(identifier)

    def invoke(self, identifier: str, argv: Sequence[str] = ()) -> Any:
        return self.find_task(identifier).run(argv)

    def list_groups(
        self,
        search: str = "",
        *,
        substring: bool = False,
        group: str = "standard",
        all_groups: bool = False,
    ) -> List[TaskGroup]:
        self.initialize_task_files()
        return self.namespace.find_groups(
            search, substring=substring, group=group, all_groups=all_groups
        )

    def installed_groups(self) -> List[TaskGroup]:
        """Load every installed module and return the groups they define."""

        self.loader.load_all(self.discoverer.system_files())
        return list(self.namespace)

    def modules(self) -> List[RegistryEntry]:
        return self.registry.entries()

    def install(self, source: str, *, as_: Optional[str] = None, relative: bool = False) -> Optional[str]:
        return self.lifecycle.install(source, as_=as_, relative=relative)

    def uninstall(self, alias: str) -> None:
        self.lifecycle.uninstall(alias)

    def update(self, alias: str) -> Optional[str]:
        return self.lifecycle.update(alias)


__all__ = ["Runner"]
