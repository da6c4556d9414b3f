"""Install, update and uninstall modules in the system repository."""

from __future__ import annotations

import dataclasses
import hashlib
import logging
import os
import pathlib
from typing import Optional

import httpx

from .config import ENTRY_POINT
from .errors import AliasNotFound, RemoteFetchFailed, SourceNotFound
from .models import RegistryEntry, is_url
from .prompt import Prompter
from .registry import Registry
from .store import ContentStore
from .util import constants_in_contents, module_name_from_contents

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class FetchedSource:
    """Raw contents of an install source and where they were read from."""

    source: str
    base: str
    contents: str
    directory: Optional[pathlib.Path] = None


def stored_id_for(source: str, alias: str) -> str:
    """Return the object id for ``source`` installed as ``alias``.

    The id depends on the install parameters only, so reinstalling an alias
    from the same location reuses its object while the same contents under
    another alias get their own copy.
    """

    return hashlib.md5((source + alias).encode("utf-8")).hexdigest()


class LifecycleManager:
    """Keeps the content store and the registry in step.

    During install the registry is saved before the object is written. A
    crash in between leaves an entry whose object is missing; loading it
    reports a warning and running ``install`` or ``update`` again repairs it.
    """

    def __init__(
        self,
        store: ContentStore,
        registry: Registry,
        prompter: Prompter,
        *,
        client: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._prompter = prompter
        self._client = client
        self._timeout = timeout

    @property
    def prompter(self) -> Prompter:
        return self._prompter

    @prompter.setter
    def prompter(self, prompter: Prompter) -> None:
        self._prompter = prompter

    def fetch(self, source: str) -> FetchedSource:
        """Read the contents an install of ``source`` would store."""

        if is_url(source):
            return FetchedSource(source=source, base=source, contents=self._fetch_remote(source))

        expanded = pathlib.Path(os.path.expanduser(source))
        if expanded.is_dir():
            base = expanded / ENTRY_POINT
            return FetchedSource(
                source=source,
                base=str(base),
                contents=_read_local(base),
                directory=expanded,
            )
        return FetchedSource(source=source, base=source, contents=_read_local(expanded))

    def install(
        self,
        source: str,
        *,
        as_: Optional[str] = None,
        relative: bool = False,
    ) -> Optional[str]:
        """Install ``source`` and return its stored id, or ``None`` when declined."""

        fetched = self.fetch(source)

        if not self._prompter.confirm(source, fetched.contents):
            logger.info("Installation of %s cancelled.", source)
            return None

        alias = as_ or module_name_from_contents(fetched.contents)
        if not alias:
            alias = self._prompter.ask_alias(source) or source

        if relative or is_url(source) or os.path.isabs(source):
            location = source
        else:
            location = os.path.abspath(os.path.expanduser(source))

        entry = RegistryEntry(
            alias=alias,
            stored_id=stored_id_for(source, alias),
            location=location,
            namespace_ids=constants_in_contents(fetched.contents, fetched.base),
        )

        self._store.ensure_root()
        self._registry.set(alias, entry)
        self._registry.save()

        logger.info("Storing task file in your system repository")
        if fetched.directory is not None:
            self._store.put_tree(entry.stored_id, fetched.directory)
        else:
            self._store.put(entry.stored_id, fetched.contents)

        return entry.stored_id

    def uninstall(self, alias: str) -> None:
        entry = self._registry.get(alias)
        if entry is None:
            raise AliasNotFound(f"Can't find module '{alias}'")

        logger.info("Uninstalling %s.", alias)
        self._store.remove(entry.stored_id)
        self._registry.delete(alias)
        self._registry.save()
        logger.info("Done.")

    def update(self, alias: str) -> Optional[str]:
        """Reinstall ``alias`` from its recorded location."""

        entry = self._registry.get(alias)
        if entry is None or not entry.location:
            raise AliasNotFound(f"Can't find module '{alias}'")

        logger.info("Updating '%s' from %s", alias, entry.location)
        old_id = entry.stored_id
        new_id = self.install(entry.location, as_=alias, relative=entry.is_relative)
        if new_id is not None and new_id != old_id:
            self._store.remove(old_id)
        return new_id

    def _fetch_remote(self, url: str) -> str:
        try:
            if self._client is not None:
                response = self._client.get(url, follow_redirects=True)
            else:
                response = httpx.get(url, follow_redirects=True, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise RemoteFetchFailed(f"Error opening URI '{url}': {exc}") from exc
        return response.text


def _read_local(path: pathlib.Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceNotFound(f"Error opening file '{path}'") from exc
    except UnicodeDecodeError as exc:
        raise SourceNotFound(f"Error reading file '{path}': not valid UTF-8 ({exc.reason})") from exc


__all__ = ["FetchedSource", "LifecycleManager", "stored_id_for"]
