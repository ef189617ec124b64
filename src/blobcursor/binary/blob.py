from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .codecs import primitive
from .types import SHARED_TYPES, TypeRegistry, lookup
from blobcursor.errors import DecodeError, EmptyMarkerStackError, UnknownMarkerError
from blobcursor.models.state import BlobState

logger = logging.getLogger(__name__)

ABSOLUTE = "absolute"

Generator = Union[str, Callable[["Blob"], object]]


def _collapse(values: tuple):
    return values[0] if len(values) == 1 else values


def _format(descriptor: str, args: tuple) -> str:
    if not args:
        return descriptor
    try:
        return descriptor % args
    except (TypeError, ValueError) as e:
        raise DecodeError(f"cannot format descriptor {descriptor!r} with {args!r}: {e}") from e


class Blob:
    """
    Stateful read cursor over an immutable byte buffer.

    Positions are 0-based and local to the blob: ``pos == 0`` is the byte at
    ``offset`` in ``buffer``. Blobs produced by ``split`` share the buffer but
    nothing else.
    """

    __slots__ = ("buffer", "pos", "_offset", "markers", "stack", "local_types")

    # Shared by every blob in the process. Registrations are not synchronized.
    types = SHARED_TYPES

    def __init__(self, data: Union[bytes, bytearray, memoryview], offset: int = 0):
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        self.buffer = data if isinstance(data, bytes) else bytes(data)
        self.pos = 0
        self._offset = offset
        self.markers: Dict[str, int] = {}
        self.stack: List[int] = []
        self.local_types = TypeRegistry()

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Blob":
        from .reader import load
        return load(path)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def absolute(self) -> int:
        return self.pos + self._offset

    def tell(self) -> int: return self.pos

    def remaining(self) -> int: return max(0, len(self.buffer) - self.absolute)

    def seek(self, pos: int) -> None:
        self.pos = pos

    def skip(self, n: int) -> int:
        self.pos += n
        return self.pos

    # ---- markers ----

    def mark(self, name: Optional[str] = None) -> int:
        """Remember the current position, by name or on the anonymous stack."""
        if name is not None:
            self.markers[name] = self.pos
        else:
            self.stack.append(self.pos)
        return self.pos

    def drop(self, name: Optional[str] = None) -> int:
        """Forget a marker without moving; returns the dropped position."""
        if name is not None:
            try:
                return self.markers.pop(name)
            except KeyError:
                raise UnknownMarkerError(name) from None
        if not self.stack:
            raise EmptyMarkerStackError("no anonymous marker to drop")
        return self.stack.pop()

    def restore(self, name: Optional[str] = None) -> int:
        """
        Jump back to a marker. Named markers stay in place and can be restored
        again; anonymous markers are popped.
        """
        if name is not None:
            try:
                pos = self.markers[name]
            except KeyError:
                raise UnknownMarkerError(name) from None
        else:
            pos = self.drop()
        self.pos = pos
        return pos

    # ---- types ----

    def register_type(self, name: str, definition, *, shared: bool = False):
        registry = self.types if shared else self.local_types
        return registry.register(name, definition)

    def resolve(self, name: str, *args) -> str:
        return lookup(name, *args, registries=(self.local_types, self.types))

    def has_type(self, name: str) -> bool:
        return name in self.local_types or name in self.types

    # ---- decoding ----

    def unpack(self, descriptor: str, *args) -> Tuple[object, int]:
        """
        Decode at the current position and advance past it.

        Extra ``args`` are %-formatted into ``descriptor`` first, so
        ``unpack("c%d", 4)`` reads four bytes. Returns ``(value, pos)`` where
        value is a tuple if the descriptor yields zero or several values.
        """
        descriptor = _format(descriptor, args)
        values, end = primitive.decode(self.buffer, self.absolute, descriptor)
        self.pos = end - self._offset
        return _collapse(values), self.pos

    def read(self, descriptor: str, *args):
        return self.unpack(descriptor, *args)[0]

    def peek(self, descriptor: str, *args):
        descriptor = _format(descriptor, args)
        values, _ = primitive.decode(self.buffer, self.absolute, descriptor)
        return _collapse(values)

    def read_type(self, name: str, *args):
        return self.read(self.resolve(name, *args))

    def __getattr__(self, name: str):
        # Only reached when normal lookup fails: expose registered types as methods.
        if name.startswith("_") or name in Blob.__slots__:
            raise AttributeError(name)
        if not self.has_type(name):
            raise AttributeError(f"{type(self).__name__!s} has no attribute or type {name!r}")

        def reader(*args):
            return self.read_type(name, *args)

        reader.__name__ = name
        return reader

    @staticmethod
    def size(*descriptors: str) -> int:
        return primitive.size_all(descriptors)

    # ---- repetition ----

    def array(self, count: int, generator: Generator, *args) -> list:
        """
        Call ``generator(self)`` ``count`` times and collect the results. A
        tuple result is reduced to its first element. A descriptor may be given
        instead of a callable, in which case each element is one ``read`` and
        ``args`` fill its template.
        """
        out = []
        if callable(generator):
            if args:
                raise TypeError("template args only apply to a descriptor, not a callable generator")
            for _ in range(count):
                value = generator(self)
                out.append(value[0] if isinstance(value, tuple) else value)
        else:
            for _ in range(count):
                out.append(self.read(generator, *args))
        return out

    # ---- alignment ----

    def _pad_size(self, size: Union[int, str]) -> int:
        if isinstance(size, int):
            return size
        if self.has_type(size):
            try:
                size = self.resolve(size)
            except TypeError as e:
                raise DecodeError(f"type {size!r} needs arguments and cannot size a pad: {e}") from e
        return primitive.size(size)

    def pad(self, size: Union[int, str], reference: Union[None, int, str] = None) -> int:
        """
        Align the position to ``size`` bytes (a count, a type name or a
        descriptor). The boundary is counted from this blob's start unless
        ``reference`` gives a position or a named marker. With ``"absolute"``
        the position is simply advanced by ``size``.
        """
        step = self._pad_size(size)
        if reference == ABSOLUTE:
            self.pos += step
            return self.pos
        if reference is None:
            origin = self._offset
        elif isinstance(reference, int):
            origin = reference + self._offset
        else:
            try:
                origin = self.markers[reference] + self._offset
            except KeyError:
                raise UnknownMarkerError(reference) from None
        if step <= 1:
            return self.pos
        self.pos += (origin - self.absolute) % step
        return self.pos

    # ---- branching ----

    def split(self, length: Optional[int] = None) -> "Blob":
        """
        New blob starting at the current position, over the same buffer.
        With ``length``, this blob then skips that many bytes.
        """
        child = Blob(self.buffer, self.absolute)
        if length:
            self.pos += length
        logger.debug("split at absolute offset %d (length=%r)", child.offset, length)
        return child

    # ---- introspection ----

    def state(self) -> BlobState:
        return BlobState(
            pos=self.pos,
            offset=self._offset,
            absolute=self.absolute,
            length=len(self.buffer),
            markers=dict(self.markers),
            stack=list(self.stack),
            local_types=list(self.local_types.names()),
        )

    def __repr__(self) -> str:
        return f"<Blob pos={self.pos} offset={self._offset} size={len(self.buffer)}>"
