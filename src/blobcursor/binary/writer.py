from __future__ import annotations

from .codecs import primitive
from .types import SHARED_TYPES, TypeRegistry, lookup


def pack(descriptor: str, *values) -> bytes:
    """Encode ``values`` with a literal descriptor; the inverse of ``Blob.read``."""
    return primitive.encode(descriptor, *values)


def pack_type(name: str, *values, args: tuple = (), local: TypeRegistry | None = None) -> bytes:
    """Encode through a named type; ``args`` go to a parametric type's factory."""
    registries = (local, SHARED_TYPES) if local is not None else (SHARED_TYPES,)
    return primitive.encode(lookup(name, *args, registries=registries), *values)
