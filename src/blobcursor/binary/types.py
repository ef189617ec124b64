from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Optional, Union

from blobcursor.errors import UnknownTypeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiteralType:
    descriptor: str

    def resolve(self, *args) -> str:
        return self.descriptor


@dataclass(frozen=True)
class ParametricType:
    factory: Callable[..., str]

    def resolve(self, *args) -> str:
        return self.factory(*args)


TypeEntry = Union[LiteralType, ParametricType]


def as_entry(definition: Union[str, Callable[..., str], TypeEntry]) -> TypeEntry:
    """Tag a raw definition once, at registration time."""
    if isinstance(definition, (LiteralType, ParametricType)):
        return definition
    if isinstance(definition, str):
        return LiteralType(definition)
    if callable(definition):
        return ParametricType(definition)
    raise TypeError(f"type definition must be a descriptor or a callable, got {definition!r}")


class TypeRegistry:
    """Mapping from type name to descriptor entry."""

    def __init__(self, entries: Optional[Dict[str, object]] = None, *, label: str = "local"):
        self.label = label
        self._entries: Dict[str, TypeEntry] = {}
        for name, definition in (entries or {}).items():
            self._entries[name] = as_entry(definition)

    def register(self, name: str, definition) -> TypeEntry:
        if not name.isidentifier():
            raise ValueError(f"type name must be an identifier, got {name!r}")
        entry = as_entry(definition)
        if name in self._entries:
            logger.debug("%s type %r redefined", self.label, name)
        self._entries[name] = entry
        logger.debug("registered %s type %r -> %r", self.label, name, entry)
        return entry

    def unregister(self, name: str) -> TypeEntry:
        try:
            return self._entries.pop(name)
        except KeyError:
            raise UnknownTypeError(name) from None

    def get(self, name: str) -> Optional[TypeEntry]:
        return self._entries.get(name)

    def names(self) -> Iterable[str]:
        return tuple(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TypeRegistry({self.label}, {sorted(self._entries)})"


def lookup(name: str, *args, registries: Iterable[TypeRegistry]) -> str:
    """
    Resolve ``name`` against ``registries`` in order. Parametric entries are
    called with ``args``; literal entries ignore them.
    """
    for registry in registries:
        entry = registry.get(name)
        if entry is not None:
            return entry.resolve(*args)
    raise UnknownTypeError(name)


def _bytes(count: int) -> str:
    return f"c{int(count)}"


def _pstring(width: int = 1) -> str:
    return f"I{int(width)}c0"


DEFAULT_TYPES = {
    "byte": "c1",
    "word": "c2",
    "dword": "c4",
    "bytes": _bytes,
    "cstring": "s",
    "pstring": _pstring,
}

# Process-wide registry; every Blob sees it after its own local types.
SHARED_TYPES = TypeRegistry(DEFAULT_TYPES, label="shared")
