from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple, Union

from ..blob import Blob
from blobcursor.errors import RiffError
from blobcursor.models.riff import Chunk, RiffFile

logger = logging.getLogger(__name__)

CONTAINERS = ("RIFF", "LIST")

# RIFF is little-endian regardless of the configured default.
FOURCC = "c4"
CK_SIZE = "<I4"


def _fourcc(raw: bytes) -> str:
    return raw.decode("ascii", errors="replace")


def read_chunk_header(blob: Blob) -> Tuple[str, int]:
    """8-byte chunk header: FOURCC id, then the little-endian body size."""
    fourcc = _fourcc(blob.read(FOURCC))
    size = blob.read(CK_SIZE)
    return fourcc, size


def iter_chunks(blob: Blob, end: Optional[int] = None) -> Iterator[Chunk]:
    """
    Walk consecutive chunks from the current position up to ``end`` (a
    position in ``blob``). Bodies are read through split-off blobs; the walker
    itself skips each body plus its pad byte. Markers and types of ``blob``
    are left alone.
    """
    if end is None:
        end = blob.pos + blob.remaining()

    while blob.pos + 8 <= end:
        start = blob.absolute
        fourcc, size = read_chunk_header(blob)
        body_pos = blob.pos
        if blob.pos + size > end:
            raise RiffError(f"chunk {fourcc!r} at {start} overruns its container: size {size}")

        body = blob.split(size)
        chunk = Chunk(fourcc=fourcc, size=size, offset=start)
        if fourcc in CONTAINERS:
            if size < 4:
                raise RiffError(f"{fourcc} chunk at {start} too small for a form type")
            chunk.form = _fourcc(body.read(FOURCC))
            chunk.children = list(iter_chunks(body, size))
        else:
            chunk.data = body.read("c%d", size) if size else b""
        logger.debug("chunk %s size=%d at %d", fourcc, size, start)

        # Bodies are word aligned; the pad byte is not counted in size.
        blob.pad(2, body_pos)
        yield chunk


def parse_riff(data: Union[bytes, bytearray, memoryview, Blob]) -> RiffFile:
    """Parse a top-level RIFF form, e.g. a WAVE or AVI file."""
    blob = data if isinstance(data, Blob) else Blob(data)
    if blob.remaining() < 12:
        raise RiffError(f"need at least 12 bytes for a RIFF header, have {blob.remaining()}")

    start = blob.absolute
    fourcc, size = read_chunk_header(blob)
    if fourcc != "RIFF":
        raise RiffError(f"not a RIFF file: leading id {fourcc!r}")
    end = blob.pos + size
    if blob.absolute + size > len(blob.buffer):
        raise RiffError(f"RIFF size {size} overruns buffer of {len(blob.buffer)} bytes at {start}")
    if size < 4:
        raise RiffError(f"RIFF size {size} too small for a form type")

    form = _fourcc(blob.read(FOURCC))
    return RiffFile(form=form, size=size, chunks=list(iter_chunks(blob, end)))
