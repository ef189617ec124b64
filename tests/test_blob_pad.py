import pytest

from blobcursor.binary.blob import Blob
from blobcursor.errors import DecodeError, UnknownMarkerError


def test_padding_at_start_is_noop(lorem):
    blob = Blob(lorem)
    blob.pad("word")
    assert blob.pos == 0
    blob.pad("c256")
    assert blob.pos == 0
    blob.pad(64)
    assert blob.pos == 0


def test_padding(lorem):
    blob = Blob(lorem)
    blob.byte()
    assert blob.pad("word") == 2
    assert blob.pad("I4") == 4
    assert blob.pad("c10") == 10
    assert blob.pad(32) == 32
    # single-byte alignment has no effect
    assert blob.pad(1) == 32
    assert blob.pad("byte") == 32
    assert blob.pad(0) == 32


def test_pad_is_idempotent(lorem):
    blob = Blob(lorem)
    blob.seek(5)
    assert blob.pad(8) == 8
    assert blob.pad(8) == 8


def test_absolute_padding_always_advances(lorem):
    blob = Blob(lorem)
    blob.seek(32)
    assert blob.pad(30, "absolute") == 62
    blob.seek(4)
    assert blob.pad(4, "absolute") == 8
    assert blob.pad(0, "absolute") == 8


def test_pad_relative_to_marker(lorem):
    blob = Blob(lorem)
    blob.seek(12)
    blob.mark("beginning")
    blob.read("c6")
    blob.mark("unpadded")
    blob.pad("c8", "beginning")
    assert blob.pos == 20
    blob.restore("unpadded")
    blob.pad("c8")
    assert blob.pos == 24


def test_pad_relative_to_position(lorem):
    blob = Blob(lorem)
    blob.seek(7)
    assert blob.pad(4, 1) == 9
    assert blob.pad(4, 9) == 9


def test_pad_one_based_scenario(lorem):
    # 1-based position 23 padded to 4 lands on 1-based 25
    blob = Blob(lorem)
    blob.seek(22)
    assert blob.pad(4) == 24


def test_pad_in_split_blob_uses_own_start(lorem):
    blob = Blob(lorem)
    blob.seek(3)
    child = blob.split()
    child.seek(1)
    assert child.pad(4) == 4
    assert child.absolute == 7


def test_pad_unknown_marker(lorem):
    blob = Blob(lorem)
    blob.seek(3)
    with pytest.raises(UnknownMarkerError):
        blob.pad(4, "missing")
    assert blob.pos == 3


def test_pad_with_parametric_type_needs_args(lorem):
    blob = Blob(lorem)
    blob.seek(3)
    with pytest.raises(DecodeError):
        blob.pad("bytes")
    assert blob.pos == 3
