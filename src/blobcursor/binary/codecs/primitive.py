"""
Primitive decode engine.

A descriptor is a compact format string, e.g. ``"<I2c4"`` (little-endian
2-byte unsigned, then 4 raw bytes).

    < > =      byte order: little, big, configured default
    !n         max alignment for following numeric fields (bare '!': config)
    x          one padding byte, no value
    b B        1-byte int (lower case = signed, throughout)
    h H        2-byte int
    l L        4-byte int
    q Q        8-byte int
    i[n] I[n]  n-byte int, 1..8 (bare: config int_size)
    f d        IEEE float / double
    c[n]       n raw bytes (bare: 1)
    c0         raw bytes, length taken from the previous value
    s          zero-terminated bytes

Offsets are absolute, 0-based indices into the buffer. Alignment is computed
against the start of the buffer.
"""
from __future__ import annotations

import struct
from typing import List, Optional, Sequence, Tuple

from blobcursor.config import get_settings
from blobcursor.errors import DecodeError, EncodeError

Op = Tuple[str, Optional[int]]

_FIXED = {
    "x": 1,
    "b": 1, "B": 1,
    "h": 2, "H": 2,
    "l": 4, "L": 4,
    "q": 8, "Q": 8,
    "f": 4, "d": 8,
}
_SIZED = "iIc!"


def parse(descriptor: str) -> List[Op]:
    """Split a descriptor into ``(code, width)`` ops; width is None when defaulted."""
    if not isinstance(descriptor, str):
        raise DecodeError(f"descriptor must be a string, got {type(descriptor).__name__}")
    ops: List[Op] = []
    i, n = 0, len(descriptor)
    while i < n:
        ch = descriptor[i]
        i += 1
        if ch.isspace():
            continue
        j = i
        while j < n and descriptor[j].isdigit():
            j += 1
        digits = descriptor[i:j]
        i = j
        if ch in "<>=":
            if digits:
                raise DecodeError(f"byte order {ch!r} takes no width in {descriptor!r}")
            ops.append((ch, None))
        elif ch in _FIXED or ch == "s":
            if digits:
                raise DecodeError(f"{ch!r} takes no width in {descriptor!r}")
            ops.append((ch, _FIXED.get(ch, 0)))
        elif ch in _SIZED:
            width = int(digits) if digits else None
            if ch in "iI" and width is not None and not 1 <= width <= 8:
                raise DecodeError(f"integer width {width} out of range 1..8 in {descriptor!r}")
            if ch == "!" and width == 0:
                raise DecodeError(f"alignment must be positive in {descriptor!r}")
            ops.append((ch, width))
        else:
            raise DecodeError(f"invalid option {ch!r} in descriptor {descriptor!r}")
    return ops


def _align(pos: int, width: int, align: int) -> int:
    step = min(width, align)
    if step <= 1:
        return pos
    return pos + (-pos) % step


def _need(buffer: bytes, pos: int, n: int) -> None:
    if pos + n > len(buffer):
        raise DecodeError(f"underrun: need {n} bytes at offset {pos}, buffer has {len(buffer)}")


def _endian(order: str) -> str:
    return "little" if order == "<" else "big"


def decode(buffer: bytes, offset: int, descriptor: str) -> Tuple[tuple, int]:
    """Decode ``descriptor`` at ``offset``; returns (values, new_offset)."""
    if offset < 0:
        raise DecodeError(f"offset {offset} is before the start of the buffer")
    settings = get_settings()
    order = settings.byte_order
    align = 1
    values: list = []
    pos = offset
    for code, width in parse(descriptor):
        if code in "<>":
            order = code
        elif code == "=":
            order = settings.byte_order
        elif code == "!":
            align = width or settings.max_alignment
        elif code == "x":
            _need(buffer, pos, 1)
            pos += 1
        elif code == "s":
            end = buffer.find(b"\x00", pos)
            if end < 0:
                raise DecodeError(f"unterminated string at offset {pos}")
            values.append(bytes(buffer[pos:end]))
            pos = end + 1
        elif code == "c":
            if width is None:
                width = 1
            elif width == 0:
                if not values or not isinstance(values[-1], int):
                    raise DecodeError("'c0' needs a preceding integer length")
                width = values.pop()
                if width < 0:
                    raise DecodeError(f"negative length {width} for 'c0'")
            _need(buffer, pos, width)
            values.append(bytes(buffer[pos:pos + width]))
            pos += width
        else:
            width = width or settings.int_size
            pos = _align(pos, width, align)
            _need(buffer, pos, width)
            chunk = buffer[pos:pos + width]
            if code in "fd":
                values.append(struct.unpack(("<" if order == "<" else ">") + code, chunk)[0])
            else:
                values.append(int.from_bytes(chunk, _endian(order), signed=code.islower()))
            pos += width
    return tuple(values), pos


def encode(descriptor: str, *values) -> bytes:
    """
    Inverse of ``decode``. A ``c0`` consumes one bytes value and writes its
    length through the integer field just before it, so ``encode("B c0", b"abc")``
    gives ``b"\\x03abc"``.
    """
    settings = get_settings()
    ops = parse(descriptor)
    order = settings.byte_order
    align = 1
    items = list(values)
    out = bytearray()

    def _next(code: str):
        if not items:
            raise EncodeError(f"not enough values for {code!r} in {descriptor!r}")
        return items.pop(0)

    for idx, (code, width) in enumerate(ops):
        if code in "<>":
            order = code
        elif code == "=":
            order = settings.byte_order
        elif code == "!":
            align = width or settings.max_alignment
        elif code == "x":
            out += b"\x00"
        elif code == "s":
            raw = bytes(_next(code))
            if b"\x00" in raw:
                raise EncodeError("zero byte inside a zero-terminated string")
            out += raw + b"\x00"
        elif code == "c":
            raw = bytes(_next(code))
            if width is None:
                width = 1
            if width and len(raw) > width:
                raise EncodeError(f"{len(raw)} bytes do not fit 'c{width}'")
            out += raw.ljust(width, b"\x00") if width else raw
        else:
            width = width or settings.int_size
            nxt = ops[idx + 1] if idx + 1 < len(ops) else None
            if nxt == ("c", 0):
                if not items:
                    raise EncodeError(f"not enough values for 'c0' in {descriptor!r}")
                value = len(items[0])
            else:
                value = _next(code)
            out += b"\x00" * (_align(len(out), width, align) - len(out))
            try:
                if code in "fd":
                    out += struct.pack(("<" if order == "<" else ">") + code, value)
                else:
                    out += int(value).to_bytes(width, _endian(order), signed=code.islower())
            except (OverflowError, struct.error) as e:
                raise EncodeError(f"cannot encode {value!r} as {code!r}: {e}") from e
    if items:
        raise EncodeError(f"{len(items)} unused value(s) for {descriptor!r}")
    return bytes(out)


def size(descriptor: str) -> int:
    """Byte length of a fixed-layout descriptor. Variable-length ops are rejected."""
    settings = get_settings()
    align = 1
    total = 0
    for code, width in parse(descriptor):
        if code in "<>=":
            continue
        if code == "!":
            align = width or settings.max_alignment
        elif code == "s" or (code == "c" and width == 0):
            raise DecodeError(f"variable-length option in {descriptor!r} has no static size")
        elif code == "c":
            total += 1 if width is None else width
        elif code == "x":
            total += 1
        else:
            width = width or settings.int_size
            total = _align(total, width, align) + width
    return total


def size_all(descriptors: Sequence[str]) -> int:
    return sum(size(d) for d in descriptors)
