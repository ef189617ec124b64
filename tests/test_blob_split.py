from blobcursor.binary.blob import Blob


def test_offset_and_splitting():
    blob = Blob(b"xkcdabcd1234")
    assert blob.bytes(2) == b"xk"
    blob.mark()
    split = blob.split()
    # the offset into the buffer is not visible in the position
    assert split.pos == 0
    assert split.offset == 2
    assert blob.pos == 2
    # both blobs now read independently
    assert blob.bytes(2) == b"cd"
    assert split.bytes(2) == b"cd"

    blob.restore()
    assert blob.pos == 2
    split = blob.split(4)
    assert blob.pos == 6
    assert blob.bytes(6) == b"cd1234"
    # the branch is not limited to the skipped length
    assert split.bytes(6) == b"cdabcd"


def test_split_shares_buffer_only():
    blob = Blob(b"xkcdabcd1234")
    blob.seek(4)
    blob.mark("parent")
    blob.register_type("quad", "c4")
    child = blob.split()
    assert child.buffer is blob.buffer
    assert child.markers == {} and child.stack == []
    assert "quad" not in child.local_types

    child.mark("child")
    child.register_type("pair", "c2")
    child.seek(3)
    assert "child" not in blob.markers
    assert "pair" not in blob.local_types
    assert blob.pos == 4
    assert blob.quad() == b"abcd"
    assert child.pair() == b"d1"


def test_nested_split_offsets_accumulate():
    blob = Blob(b"0123456789")
    blob.seek(2)
    child = blob.split()
    child.seek(3)
    grandchild = child.split(2)
    assert grandchild.offset == 5
    assert child.pos == 5
    assert grandchild.read("c2") == b"56"


def test_split_zero_length_does_not_move():
    blob = Blob(b"0123")
    blob.seek(1)
    blob.split(0)
    assert blob.pos == 1
