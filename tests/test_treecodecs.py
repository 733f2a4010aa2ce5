import io

import pytest

from xzkit.rangecoder import PROB_INIT, ByteReader, RangeDecoder, RangeEncoder
from xzkit.treecodecs import TreeCodec, TreeReverseCodec


def _round_trip(cls, bits, values):
    sink = bytearray()
    enc = RangeEncoder(sink)
    codec = cls(bits)
    for v in values:
        codec.encode(enc, v)
    enc.close()
    dec = RangeDecoder(ByteReader(io.BytesIO(bytes(sink))))
    dcodec = cls(bits)
    decoded = [dcodec.decode(dec) for _ in values]
    return decoded, codec, dcodec


@pytest.mark.parametrize("cls", [TreeCodec, TreeReverseCodec])
@pytest.mark.parametrize("bits", [1, 3, 6, 8])
def test_round_trip_all_values(cls, bits):
    values = list(range(1 << bits)) + list(range((1 << bits) - 1, -1, -1))
    decoded, codec, dcodec = _round_trip(cls, bits, values)
    assert decoded == values
    assert codec.probs == dcodec.probs


@pytest.mark.parametrize("cls", [TreeCodec, TreeReverseCodec])
@pytest.mark.parametrize("bits", [0, 33])
def test_bits_out_of_range(cls, bits):
    with pytest.raises(ValueError):
        cls(bits)


@pytest.mark.parametrize("cls", [TreeCodec, TreeReverseCodec])
def test_initial_probabilities(cls):
    codec = cls(4)
    assert set(codec.probs) == {PROB_INIT}
    assert codec.bits == 4


@pytest.mark.parametrize("cls", [TreeCodec, TreeReverseCodec])
def test_copy_is_independent(cls):
    codec = cls(3)
    before = list(codec.probs)
    clone = codec.copy()
    codec.encode(RangeEncoder(bytearray()), 5)
    assert clone.probs == before
    assert codec.probs != before
    assert clone.bits == codec.bits


def test_forward_and_reverse_differ_in_bit_order():
    _, fwd, _ = _round_trip(TreeCodec, 2, [1])
    _, rev, _ = _round_trip(TreeReverseCodec, 2, [1])
    # forward codes bit 0 first at node 1, reverse codes bit 1 first
    assert fwd.probs[1] > PROB_INIT
    assert rev.probs[1] < PROB_INIT