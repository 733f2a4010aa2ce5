import io

import pytest

from xzkit.codecs import (
    LEN_STATES,
    MAX_MATCH_LEN,
    MIN_MATCH_LEN,
    DistCodec,
    LengthCodec,
    LiteralCodec,
    len_state,
)
from xzkit.errors import LZMAError
from xzkit.rangecoder import RangeDecoder, RangeEncoder, byte_reader


def _encode(fn):
    out = bytearray()
    enc = RangeEncoder(out)
    fn(enc)
    enc.close()
    return RangeDecoder(byte_reader(io.BytesIO(bytes(out))))


def test_len_state_clamps():
    assert len_state(0) == 0
    assert len_state(2) == 2
    assert len_state(100) == LEN_STATES - 1


def test_length_roundtrip():
    values = list(range(MAX_MATCH_LEN - MIN_MATCH_LEN + 1))
    enc_codec = LengthCodec()

    def fn(enc):
        for i, v in enumerate(values):
            enc_codec.encode(enc, v, i % 16)

    dec = _encode(fn)
    dec_codec = LengthCodec()
    got = [dec_codec.decode(dec, i % 16) for i in range(len(values))]
    assert got == values


def test_length_out_of_range():
    codec = LengthCodec()
    enc = RangeEncoder(bytearray())
    with pytest.raises(LZMAError):
        codec.encode(enc, MAX_MATCH_LEN - MIN_MATCH_LEN + 1, 0)


def test_length_copy_is_independent():
    codec = LengthCodec()
    clone = codec.copy()
    enc = RangeEncoder(bytearray())
    codec.encode(enc, 20, 0)
    assert clone.choice != codec.choice
    assert clone.high.probs != codec.high.probs


@pytest.mark.parametrize("state", [0, 6, 7, 11])
def test_literal_roundtrip(state):
    data = b"The quick brown fox jumps over the lazy dog.\x00\xff"
    match = ord("q")
    enc_codec = LiteralCodec(3, 0)

    def fn(enc):
        for i, c in enumerate(data):
            enc_codec.encode(enc, c, state, match, i % 8)

    dec = _encode(fn)
    dec_codec = LiteralCodec(3, 0)
    got = bytes(dec_codec.decode(dec, state, match, i % 8) for i in range(len(data)))
    assert got == data


def test_literal_range_checks():
    with pytest.raises(ValueError):
        LiteralCodec(9, 0)
    with pytest.raises(ValueError):
        LiteralCodec(0, 5)


def test_literal_probs_size_and_copy():
    codec = LiteralCodec(3, 0)
    assert len(codec.probs) == 0x300 << 3
    clone = codec.copy()
    codec.encode(RangeEncoder(bytearray()), 65, 0, 0, 0)
    assert clone.probs != codec.probs


def test_dist_roundtrip():
    dists = [0, 1, 2, 3, 4, 5, 7, 8, 100, 127, 128, 1000, 4095, 65536,
             1 << 20, (1 << 31) + 5, 0xFFFFFFFF]
    enc_codec = DistCodec()

    def fn(enc):
        for i, d in enumerate(dists):
            enc_codec.encode(enc, d, i % 6)

    dec = _encode(fn)
    dec_codec = DistCodec()
    got = [dec_codec.decode(dec, i % 6) for i in range(len(dists))]
    assert got == dists


def test_dist_copy_is_independent():
    codec = DistCodec()
    clone = codec.copy()
    codec.encode(RangeEncoder(bytearray()), 12345, 0)
    assert clone.pos_slot_codecs[0].probs != codec.pos_slot_codecs[0].probs