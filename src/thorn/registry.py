"""Persistent alias registry backed by ``thorn.yml``."""

from __future__ import annotations

import pathlib
from typing import Dict, Iterator, List, Mapping, Optional

import yaml

from .errors import RegistryError
from .models import RegistryEntry
from .util import constant_to_path


class Registry:
    """Mapping of alias to :class:`RegistryEntry`, loaded lazily and cached.

    Mutations only touch the in-memory copy; :meth:`save` overwrites the
    whole file. There is no locking, so concurrent writers race and the last
    one to save wins.
    """

    def __init__(self, path: pathlib.Path) -> None:
        self._path = pathlib.Path(path)
        self._entries: Optional[Dict[str, RegistryEntry]] = None

    @property
    def path(self) -> pathlib.Path:
        return self._path

    def load(self) -> "Registry":
        """Read the persistence file, replacing the cached copy."""

        entries: Dict[str, RegistryEntry] = {}
        if self._path.is_file():
            try:
                with self._path.open("r", encoding="utf-8") as handle:
                    payload = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise RegistryError(f"Registry file {self._path} is not valid YAML: {exc}") from exc

            if payload is None:
                payload = {}
            if not isinstance(payload, Mapping):
                raise RegistryError(f"Registry file {self._path} must define a mapping at the top level")

            for alias, data in payload.items():
                entries[str(alias)] = RegistryEntry.from_mapping(str(alias), data)

        self._entries = entries
        return self

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = {alias: entry.as_dict() for alias, entry in self._data.items()}
        with self._path.open("w", encoding="utf-8") as handle:
            yaml.safe_dump(payload, handle, default_flow_style=False, sort_keys=False)

    def get(self, alias: str) -> Optional[RegistryEntry]:
        return self._data.get(alias)

    def set(self, alias: str, entry: RegistryEntry) -> None:
        self._data[alias] = entry

    def delete(self, alias: str) -> None:
        self._data.pop(alias, None)

    def relevant_to(self, namespace_id: str) -> List[RegistryEntry]:
        """Return every entry that records a namespace with the task path of ``namespace_id``.

        Names are compared as task paths, so ``CI`` and ``Ci`` both match a
        request for ``ci``.
        """

        wanted = constant_to_path(namespace_id)
        return [
            entry
            for entry in self._data.values()
            if any(constant_to_path(constant) == wanted for constant in entry.namespace_ids)
        ]

    def entries(self) -> List[RegistryEntry]:
        return list(self._data.values())

    def __contains__(self, alias: object) -> bool:
        return alias in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def _data(self) -> Dict[str, RegistryEntry]:
        if self._entries is None:
            self.load()
        assert self._entries is not None
        return self._entries


__all__ = ["Registry"]
