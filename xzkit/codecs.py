"""Length, literal and distance codecs of the LZMA operation stream."""

from __future__ import annotations

from typing import List

from .errors import LZMAError
from .rangecoder import (
    PROB_INIT,
    RangeDecoder,
    RangeEncoder,
    decode_direct,
    encode_direct,
    nlz32,
)
from .treecodecs import TreeCodec, TreeReverseCodec

MAX_POS_BITS = 4

MIN_MATCH_LEN = 2
MAX_MATCH_LEN = MIN_MATCH_LEN + 16 + 256 - 1

MIN_DISTANCE = 1
MAX_DISTANCE = 1 << 32
LEN_STATES = 4
START_POS_MODEL = 4
END_POS_MODEL = 14
POS_SLOT_BITS = 6
ALIGN_BITS = 4

MIN_LC, MAX_LC = 0, 8
MIN_LP, MAX_LP = 0, 4

_MASK32 = 0xFFFFFFFF


def len_state(length: int) -> int:
    """Clamp a length offset to one of the supported length states."""
    return min(length, LEN_STATES - 1)


class LengthCodec:
    """Codes match length offsets (length minus MIN_MATCH_LEN)."""

    def __init__(self) -> None:
        self.choice: List[int] = [PROB_INIT, PROB_INIT]
        self.low = [TreeCodec(3) for _ in range(1 << MAX_POS_BITS)]
        self.mid = [TreeCodec(3) for _ in range(1 << MAX_POS_BITS)]
        self.high = TreeCodec(8)

    def copy(self) -> "LengthCodec":
        """Return an independent copy of the codec."""
        clone = LengthCodec.__new__(LengthCodec)
        clone.choice = list(self.choice)
        clone.low = [t.copy() for t in self.low]
        clone.mid = [t.copy() for t in self.mid]
        clone.high = self.high.copy()
        return clone

    def encode(self, encoder: RangeEncoder, length: int, pos_state: int) -> None:
        """Encode the length offset ``length``."""
        if not 0 <= length <= MAX_MATCH_LEN - MIN_MATCH_LEN:
            raise LZMAError("length codec: length out of range")
        if length < 8:
            encoder.encode_bit(0, self.choice, 0)
            self.low[pos_state].encode(encoder, length)
            return
        encoder.encode_bit(1, self.choice, 0)
        if length < 16:
            encoder.encode_bit(0, self.choice, 1)
            self.mid[pos_state].encode(encoder, length - 8)
            return
        encoder.encode_bit(1, self.choice, 1)
        self.high.encode(encoder, length - 16)

    def decode(self, decoder: RangeDecoder, pos_state: int) -> int:
        """Decode a length offset."""
        if decoder.decode_bit(self.choice, 0) == 0:
            return self.low[pos_state].decode(decoder)
        if decoder.decode_bit(self.choice, 1) == 0:
            return self.mid[pos_state].decode(decoder) + 8
        return self.high.decode(decoder) + 16


class LiteralCodec:
    """Codes literal bytes with 0x300 probabilities per literal state."""

    def __init__(self, lc: int, lp: int) -> None:
        if not MIN_LC <= lc <= MAX_LC:
            raise ValueError("lc out of range")
        if not MIN_LP <= lp <= MAX_LP:
            raise ValueError("lp out of range")
        self.probs: List[int] = [PROB_INIT] * (0x300 << (lc + lp))

    def copy(self) -> "LiteralCodec":
        """Return an independent copy of the codec."""
        clone = LiteralCodec.__new__(LiteralCodec)
        clone.probs = list(self.probs)
        return clone

    def encode(
        self, encoder: RangeEncoder, s: int, state: int, match: int, lit_state: int
    ) -> None:
        """Encode byte ``s`` in the context of the state and the match byte."""
        k = lit_state * 0x300
        probs = self.probs
        symbol = 1
        r = s
        if state >= 7:
            m = match
            while True:
                match_bit = (m >> 7) & 1
                m <<= 1
                bit = (r >> 7) & 1
                r <<= 1
                i = ((1 + match_bit) << 8) | symbol
                encoder.encode_bit(bit, probs, k + i)
                symbol = (symbol << 1) | bit
                if match_bit != bit or symbol >= 0x100:
                    break
        while symbol < 0x100:
            bit = (r >> 7) & 1
            r <<= 1
            encoder.encode_bit(bit, probs, k + symbol)
            symbol = (symbol << 1) | bit

    def decode(
        self, decoder: RangeDecoder, state: int, match: int, lit_state: int
    ) -> int:
        """Decode a literal byte."""
        k = lit_state * 0x300
        probs = self.probs
        symbol = 1
        if state >= 7:
            m = match
            while True:
                match_bit = (m >> 7) & 1
                m <<= 1
                i = ((1 + match_bit) << 8) | symbol
                bit = decoder.decode_bit(probs, k + i)
                symbol = (symbol << 1) | bit
                if match_bit != bit or symbol >= 0x100:
                    break
        while symbol < 0x100:
            symbol = (symbol << 1) | decoder.decode_bit(probs, k + symbol)
        return symbol - 0x100


class DistCodec:
    """Codes distance offsets (distance minus one); 0xFFFFFFFF marks the end."""

    def __init__(self) -> None:
        self.pos_slot_codecs = [TreeCodec(POS_SLOT_BITS) for _ in range(LEN_STATES)]
        self.pos_model = [
            TreeReverseCodec((slot >> 1) - 1)
            for slot in range(START_POS_MODEL, END_POS_MODEL)
        ]
        self.align_codec = TreeReverseCodec(ALIGN_BITS)

    def copy(self) -> "DistCodec":
        """Return an independent copy of the codec."""
        clone = DistCodec.__new__(DistCodec)
        clone.pos_slot_codecs = [c.copy() for c in self.pos_slot_codecs]
        clone.pos_model = [c.copy() for c in self.pos_model]
        clone.align_codec = self.align_codec.copy()
        return clone

    def encode(self, encoder: RangeEncoder, dist: int, length: int) -> None:
        """Encode the distance offset ``dist`` using the length offset as context."""
        dist &= _MASK32
        bits = 0
        if dist < START_POS_MODEL:
            pos_slot = dist
        else:
            bits = 30 - nlz32(dist)
            pos_slot = START_POS_MODEL - 2 + (bits << 1) + ((dist >> bits) & 1)
        self.pos_slot_codecs[len_state(length)].encode(encoder, pos_slot)
        if pos_slot < START_POS_MODEL:
            return
        if pos_slot < END_POS_MODEL:
            self.pos_model[pos_slot - START_POS_MODEL].encode(encoder, dist)
            return
        encode_direct(encoder, dist >> ALIGN_BITS, bits - ALIGN_BITS)
        self.align_codec.encode(encoder, dist)

    def decode(self, decoder: RangeDecoder, length: int) -> int:
        """Decode a distance offset using the length offset as context."""
        pos_slot = self.pos_slot_codecs[len_state(length)].decode(decoder)
        if pos_slot < START_POS_MODEL:
            return pos_slot
        bits = (pos_slot >> 1) - 1
        dist = (2 | (pos_slot & 1)) << bits
        if pos_slot < END_POS_MODEL:
            return dist + self.pos_model[pos_slot - START_POS_MODEL].decode(decoder)
        dist += decode_direct(decoder, bits - ALIGN_BITS) << ALIGN_BITS
        dist += self.align_codec.decode(decoder)
        return dist & _MASK32