"""Dictionary of the decoder; the whole dictionary doubles as read buffer."""

from __future__ import annotations

from .buffer import Buffer
from .codecs import MAX_MATCH_LEN
from .errors import LZMAError, NoSpaceError

MIN_DICT_CAP = 1 << 12
MAX_DICT_CAP = (1 << 32) - 1


class DecoderDict:
    """Decoder dictionary built on a circular buffer."""

    def __init__(self, dict_cap: int) -> None:
        # the lower limit of 1 keeps small test dictionaries possible
        if not 1 <= dict_cap <= MAX_DICT_CAP:
            raise LZMAError("lzma: dictCap out of range")
        self.buf = Buffer(dict_cap)
        self.head = 0

    def reset(self) -> None:
        """Clear the dictionary; buffered data can still be read."""
        self.head = 0

    def write_byte(self, c: int) -> None:
        """Append a literal byte; raise NoSpaceError if the buffer is full."""
        self.buf.write_byte(c)
        self.head += 1

    def pos(self) -> int:
        """Return the position of the dictionary head."""
        return self.head

    def dict_len(self) -> int:
        """Return the current length of the dictionary."""
        return min(self.head, self.buf.capacity())

    def byte_at(self, dist: int) -> int:
        """Return the byte ``dist`` positions back, or 0 if out of range."""
        if not 0 < dist <= self.dict_len():
            return 0
        i = self.buf.front - dist
        if i < 0:
            i += len(self.buf.data)
        return self.buf.data[i]

    def write_match(self, dist: int, length: int) -> None:
        """Copy ``length`` bytes from ``dist`` positions back to the head."""
        if not 0 < dist <= self.dict_len():
            raise LZMAError("writeMatch: distance out of range")
        if not 0 < length <= MAX_MATCH_LEN:
            raise LZMAError("writeMatch: length out of range")
        if length > self.buf.available():
            raise NoSpaceError()
        self.head += length
        data = self.buf.data
        i = self.buf.front - dist
        if i < 0:
            i += len(data)
        while length > 0:
            front = self.buf.front
            if i >= front:
                chunk = bytes(data[i:i + length])
                i = 0
            else:
                chunk = bytes(data[i:min(front, i + length)])
                i = front
            self.buf.write(chunk)
            length -= len(chunk)

    def write(self, data: bytes) -> int:
        """Append ``data`` and advance the head.

        NoSpaceError is raised if not everything fit; its ``written``
        attribute tells how much was stored.
        """
        try:
            n = self.buf.write(data)
        except NoSpaceError as err:
            self.head += err.written
            raise
        self.head += n
        return n

    def available(self) -> int:
        """Return the number of bytes that can be written."""
        return self.buf.available()

    def read(self, size: int) -> bytes:
        """Return up to ``size`` bytes of decoded data."""
        return self.buf.read(size)