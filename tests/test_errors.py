import io

import pytest

from xzkit.errors import LimitedByteWriter, LimitError, LZMAError, NoSpaceError


def test_limited_writer_bytearray_stops_at_limit():
    sink = bytearray()
    w = LimitedByteWriter(sink, 2)
    w.write_byte(ord("x"))
    w.write_byte(ord("y"))
    assert sink == bytearray(b"xy")
    assert w.remaining == 0
    with pytest.raises(LimitError):
        w.write_byte(ord("z"))
    assert sink == bytearray(b"xy")


def test_limited_writer_file_like():
    sink = io.BytesIO()
    w = LimitedByteWriter(sink, 10)
    for c in b"hello":
        w.write_byte(c)
    assert sink.getvalue() == b"hello"
    assert w.remaining == 5


def test_limited_writer_chained():
    sink = bytearray()
    inner = LimitedByteWriter(sink, 1)
    outer = LimitedByteWriter(inner, 5)
    outer.write_byte(ord("a"))
    with pytest.raises(LimitError):
        outer.write_byte(ord("b"))
    assert sink == bytearray(b"a")
    assert outer.remaining == 4


def test_limit_error_is_lzma_error():
    w = LimitedByteWriter(bytearray(), 0)
    with pytest.raises(LZMAError):
        w.write_byte(1)


def test_no_space_error_carries_count():
    err = NoSpaceError(written=7)
    assert err.written == 7
    assert str(err) == "insufficient space"