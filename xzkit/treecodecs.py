"""Bit-tree codecs encoding fixed-width values with adaptive probabilities."""

from __future__ import annotations

from typing import TypeVar

from .rangecoder import PROB_INIT, RangeDecoder, RangeEncoder

_T = TypeVar("_T", bound="_ProbTree")


class _ProbTree:
    def __init__(self, bits: int) -> None:
        if not 1 <= bits <= 32:
            raise ValueError("bits outside of range [1,32]")
        self.bits = bits
        self.probs = [PROB_INIT] * (1 << bits)

    def _clone(self: _T) -> _T:
        clone = type(self).__new__(type(self))
        clone.bits = self.bits
        clone.probs = list(self.probs)
        return clone


class TreeCodec(_ProbTree):
    """Codes values most significant bit first."""

    def __init__(self, bits: int) -> None:
        super().__init__(bits)

    def copy(self) -> TreeCodec:
        """Return an independent copy of the codec."""
        return self._clone()

    def encode(self, encoder: RangeEncoder, value: int) -> None:
        """Encode the low ``bits`` bits of ``value``."""
        m = 1
        for i in range(self.bits - 1, -1, -1):
            b = (value >> i) & 1
            encoder.encode_bit(b, self.probs, m)
            m = (m << 1) | b

    def decode(self, decoder: RangeDecoder) -> int:
        """Decode a ``bits``-bit value."""
        m = 1
        for _ in range(self.bits):
            m = (m << 1) | decoder.decode_bit(self.probs, m)
        return m - (1 << self.bits)


class TreeReverseCodec(_ProbTree):
    """Codes values least significant bit first."""

    def __init__(self, bits: int) -> None:
        super().__init__(bits)

    def copy(self) -> TreeReverseCodec:
        """Return an independent copy of the codec."""
        return self._clone()

    def encode(self, encoder: RangeEncoder, value: int) -> None:
        """Encode the low ``bits`` bits of ``value``."""
        m = 1
        for i in range(self.bits):
            b = (value >> i) & 1
            encoder.encode_bit(b, self.probs, m)
            m = (m << 1) | b

    def decode(self, decoder: RangeDecoder) -> int:
        """Decode a ``bits``-bit value."""
        m = 1
        value = 0
        for j in range(self.bits):
            b = decoder.decode_bit(self.probs, m)
            m = (m << 1) | b
            value |= b << j
        return value