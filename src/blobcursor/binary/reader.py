from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from .blob import Blob
from blobcursor.errors import BlobIOError

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]


def from_bytes(data: BytesLike) -> Blob:
    return Blob(data)


def _load_bytes(path: Union[str, Path]) -> bytes:
    p = Path(path)
    try:
        return p.read_bytes()
    except OSError as e:
        raise BlobIOError(e.errno, f"could not read {p}: {e.strerror or e}", str(p)) from e


def load(path: Union[str, Path]) -> Blob:
    """Read a whole file into memory and open a blob on it."""
    raw = _load_bytes(path)
    logger.debug("loaded %d bytes from %s", len(raw), path)
    return Blob(raw)
