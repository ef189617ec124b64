from __future__ import annotations


class BlobError(ValueError):
    pass


class UnknownTypeError(BlobError, KeyError):
    """No type of that name in the cursor's own registry or the shared one."""

    def __init__(self, name: str):
        super().__init__(f"unknown type {name!r}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class UnknownMarkerError(BlobError, KeyError):
    def __init__(self, name: str):
        super().__init__(f"unknown marker {name!r}")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class EmptyMarkerStackError(BlobError, IndexError):
    pass


class DecodeError(BlobError):
    """Malformed descriptor or not enough bytes left in the buffer."""


class EncodeError(BlobError):
    pass


class ParseError(BlobError):
    pass


class BlobIOError(OSError, BlobError):
    pass


class RiffError(ParseError):
    pass
