"""Domain models used by the module registry."""

from __future__ import annotations

import dataclasses
import os
import re
from typing import Iterable, List, Mapping

from .errors import RegistryError

_URL = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def is_url(location: str) -> bool:
    return bool(_URL.match(location))


@dataclasses.dataclass(slots=True)
class RegistryEntry:
    """An installed module as recorded in ``thorn.yml``."""

    alias: str
    stored_id: str
    location: str
    namespace_ids: List[str] = dataclasses.field(default_factory=list)

    @property
    def is_relative(self) -> bool:
        return bool(self.location) and not is_url(self.location) and not os.path.isabs(self.location)

    @classmethod
    def from_mapping(cls, alias: str, data: Mapping[str, object]) -> "RegistryEntry":
        if not isinstance(data, Mapping):
            raise RegistryError(f"Registry entry for '{alias}' must be a mapping")
        try:
            stored_id = str(data["filename"])
        except KeyError as exc:
            raise RegistryError(f"Registry entry for '{alias}' has no 'filename'") from exc
        location = data.get("location")
        return cls(
            alias=alias,
            stored_id=stored_id,
            location=str(location) if location is not None else "",
            namespace_ids=ensure_str_list(data.get("constants"), field="constants", alias=alias),
        )

    def as_dict(self) -> dict[str, object]:
        return {
            "filename": self.stored_id,
            "location": self.location,
            "constants": list(self.namespace_ids),
        }


def ensure_str_list(value: object, *, field: str, alias: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray, Mapping)):
        result: List[str] = []
        for item in value:
            if not isinstance(item, str):
                raise RegistryError(
                    f"Registry entry '{alias}' field '{field}' must contain only strings"
                )
            result.append(item)
        return result
    raise RegistryError(f"Registry entry '{alias}' field '{field}' must be a list of strings")
