"""Binary range coder used by LZMA, plus probability and bit helpers."""

from __future__ import annotations

from typing import Any, List

from .errors import LimitedByteWriter, LimitError, LZMAError

MOVE_BITS = 5
PROB_BITS = 11
PROB_INIT = 1 << (PROB_BITS - 1)

MAX_INT64 = (1 << 63) - 1

_MASK32 = 0xFFFFFFFF
_TOP = 1 << 24


def nlz32(x: int) -> int:
    """Return the number of leading zero bits of a 32-bit unsigned value."""
    return 32 - (x & _MASK32).bit_length()


class RangeEncoder:
    """Range encoder writing its output through a LimitedByteWriter."""

    def __init__(self, writer: Any) -> None:
        if isinstance(writer, LimitedByteWriter):
            self.lbw = writer
        else:
            self.lbw = LimitedByteWriter(writer, MAX_INT64)
        self.nrange = _MASK32
        self.low = 0
        self.cache_len = 1
        self.cache = 0

    def available(self) -> int:
        """Bytes that may still be written, accounting for the closing bytes."""
        return self.lbw.remaining - (self.cache_len + 4)

    def _write_byte(self, c: int) -> None:
        if self.available() < 1:
            raise LimitError()
        self.lbw.write_byte(c)

    def direct_encode_bit(self, bit: int) -> None:
        """Encode the least significant bit of ``bit`` with probability 1/2."""
        self.nrange >>= 1
        if bit & 1:
            self.low += self.nrange
        if self.nrange >= _TOP:
            return
        self.nrange = (self.nrange << 8) & _MASK32
        self._shift_low()

    def encode_bit(self, bit: int, probs: List[int], index: int) -> None:
        """Encode one bit using and updating the probability ``probs[index]``."""
        p = probs[index]
        bound = (self.nrange >> PROB_BITS) * p
        if bit & 1 == 0:
            self.nrange = bound
            probs[index] = p + (((1 << PROB_BITS) - p) >> MOVE_BITS)
        else:
            self.low += bound
            self.nrange -= bound
            probs[index] = p - (p >> MOVE_BITS)
        if self.nrange >= _TOP:
            return
        self.nrange = (self.nrange << 8) & _MASK32
        self._shift_low()

    def close(self) -> None:
        """Flush the remaining state of the encoder."""
        for _ in range(5):
            self._shift_low()

    def _shift_low(self) -> None:
        low32 = self.low & _MASK32
        if low32 < 0xFF000000 or (self.low >> 32) != 0:
            carry = self.low >> 32
            tmp = self.cache
            while True:
                self._write_byte((tmp + carry) & 0xFF)
                tmp = 0xFF
                self.cache_len -= 1
                if self.cache_len <= 0:
                    break
            self.cache = low32 >> 24
        self.cache_len += 1
        self.low = (low32 << 8) & _MASK32


class RangeDecoder:
    """Range decoder reading from an object with a ``read_byte`` method."""

    def __init__(self, reader: Any) -> None:
        self.reader = reader
        self.nrange = _MASK32
        self.code = 0
        if reader.read_byte() != 0:
            raise LZMAError("range decoder: first byte not zero")
        for _ in range(4):
            self._update_code()
        if self.code >= self.nrange:
            raise LZMAError("range decoder: code out of range")

    def possibly_at_end(self) -> bool:
        """Return True if the decoder may be at the end of the stream."""
        return self.code == 0

    def direct_decode_bit(self) -> int:
        """Decode a bit that was encoded with probability 1/2."""
        self.nrange >>= 1
        self.code = (self.code - self.nrange) & _MASK32
        if self.code >> 31:
            self.code = (self.code + self.nrange) & _MASK32
            bit = 0
        else:
            bit = 1
        if self.nrange < _TOP:
            self.nrange = (self.nrange << 8) & _MASK32
            self._update_code()
        return bit

    def decode_bit(self, probs: List[int], index: int) -> int:
        """Decode one bit using and updating the probability ``probs[index]``."""
        p = probs[index]
        bound = (self.nrange >> PROB_BITS) * p
        if self.code < bound:
            self.nrange = bound
            probs[index] = p + (((1 << PROB_BITS) - p) >> MOVE_BITS)
            bit = 0
        else:
            self.code -= bound
            self.nrange -= bound
            probs[index] = p - (p >> MOVE_BITS)
            bit = 1
        if self.nrange < _TOP:
            self.nrange = (self.nrange << 8) & _MASK32
            self._update_code()
        return bit

    def _update_code(self) -> None:
        b = self.reader.read_byte()
        self.code = ((self.code << 8) | b) & _MASK32


class ByteReader:
    """Reads single bytes from a binary stream without reading ahead."""

    def __init__(self, stream: Any) -> None:
        self.stream = stream

    def read_byte(self) -> int:
        """Return the next byte; raise EOFError at the end of the stream."""
        data = self.stream.read(1)
        if not data:
            raise EOFError("no more data")
        return data[0]


def byte_reader(stream: Any) -> Any:
    """Return ``stream`` if it reads single bytes already, else wrap it."""
    if hasattr(stream, "read_byte"):
        return stream
    return ByteReader(stream)


def encode_direct(encoder: RangeEncoder, value: int, bits: int) -> None:
    """Encode ``bits`` bits of ``value``, most significant bit first."""
    for i in range(bits - 1, -1, -1):
        encoder.direct_encode_bit(value >> i)


def decode_direct(decoder: RangeDecoder, bits: int) -> int:
    """Decode a ``bits``-bit value, most significant bit first."""
    value = 0
    for _ in range(bits):
        value = (value << 1) | decoder.direct_decode_bit()
    return value