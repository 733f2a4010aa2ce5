import io

import pytest

from xzkit.chunks import ChunkHeader, ChunkType
from xzkit.encoder import Encoder
from xzkit.encoderdict import EncoderDict
from xzkit.errors import LZMAError
from xzkit.hashtable import HashTable
from xzkit.properties import Properties
from xzkit.reader2 import Reader2, Reader2Config
from xzkit.state import State

PROPS = Properties(lc=3, lp=0, pb=2)

TEXT = (
    b"LZMA decoder test example\n"
    b"=========================\n"
    b"! LZMA ! Decoder ! TEST !\n"
    b"=========================\n"
    b"! TEST ! LZMA ! Decoder !\n"
    b"=========================\n"
)


def compressed_chunk(data, ctype=ChunkType.LRND):
    dictionary = EncoderDict(4096, 4096, HashTable(4096, 4))
    out = bytearray()
    encoder = Encoder(out, State(PROPS), dictionary)
    encoder.write(data)
    encoder.close()
    header = ChunkHeader(ctype, len(data) - 1, len(out) - 1, PROPS)
    return header.to_bytes() + bytes(out)


def uncompressed_chunk(data, reset=True):
    ctype = ChunkType.UD if reset else ChunkType.U
    return ChunkHeader(ctype, len(data) - 1).to_bytes() + data


def make_reader(data):
    return Reader2(io.BytesIO(data), Reader2Config(dict_cap=4096))


def test_single_uncompressed_chunk():
    r = make_reader(bytes([1, 0, 0, ord("a"), 0]))
    assert r.read() == b"a"
    assert r.eos()
    assert r.read() == b""


def test_eos_only():
    r = make_reader(b"\x00")
    assert r.read() == b""
    assert r.eos()


def test_several_uncompressed_chunks():
    data = (
        uncompressed_chunk(b"abc")
        + uncompressed_chunk(b"def", reset=False)
        + b"\x00"
    )
    assert make_reader(data).read() == b"abcdef"


def test_read_in_small_pieces():
    data = uncompressed_chunk(b"hello") + uncompressed_chunk(b"world", False) + b"\x00"
    r = make_reader(data)
    pieces = []
    while True:
        piece = r.read(3)
        if not piece:
            break
        assert len(piece) <= 3
        pieces.append(piece)
    assert b"".join(pieces) == b"helloworld"
    assert r.eos()


def test_compressed_chunk_round_trip():
    r = make_reader(compressed_chunk(TEXT) + b"\x00")
    assert r.read() == TEXT
    assert r.eos()


def test_compressed_then_uncompressed():
    data = compressed_chunk(TEXT) + uncompressed_chunk(b"tail", reset=False) + b"\x00"
    assert make_reader(data).read() == TEXT + b"tail"


def test_two_compressed_chunks_reuse_decoder():
    data = compressed_chunk(TEXT) + compressed_chunk(TEXT[::-1]) + b"\x00"
    assert make_reader(data).read() == TEXT + TEXT[::-1]


def test_missing_eos_chunk():
    r = make_reader(uncompressed_chunk(b"a"))
    assert r.read() == b"a"
    assert not r.eos()
    with pytest.raises(EOFError):
        r.read()


def test_first_chunk_must_reset_dictionary():
    r = make_reader(b"\x02\x00\x00a\x00")
    with pytest.raises(LZMAError):
        r.read()


def test_unsupported_header_byte():
    r = make_reader(b"\x03")
    with pytest.raises(LZMAError):
        r.read()


def test_empty_stream():
    r = make_reader(b"")
    with pytest.raises(EOFError):
        r.read()


def test_config_defaults_and_range():
    c = Reader2Config()
    c.verify()
    assert c.dict_cap == 8 * 1024 * 1024
    with pytest.raises(LZMAError):
        Reader2Config(dict_cap=100).verify()
    with pytest.raises(LZMAError):
        Reader2(io.BytesIO(b"\x00"), Reader2Config(dict_cap=100))