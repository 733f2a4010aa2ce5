"""Dictionary of the encoder with a look-ahead buffer on top of it."""

from __future__ import annotations

from typing import Any, Protocol

from .buffer import Buffer
from .decoderdict import MAX_DICT_CAP
from .errors import LZMAError, NoSpaceError


class Matcher(Protocol):
    """Finds the next operation for the data at the dictionary head."""

    def set_dict(self, dictionary: "EncoderDict") -> None: ...

    def write(self, data: bytes) -> int: ...

    def next_op(self, rep: list) -> Any: ...


class EncoderDict:
    """Holds the history of the encoder plus the data still to be coded."""

    def __init__(self, dict_cap: int, buf_size: int, matcher: Matcher) -> None:
        if not 1 <= dict_cap <= MAX_DICT_CAP:
            raise LZMAError("lzma: dictionary capacity out of range")
        if buf_size < 1:
            raise LZMAError("lzma: buffer size must be larger than zero")
        self.buf = Buffer(dict_cap + buf_size)
        self.capacity = dict_cap
        self.matcher = matcher
        self.head = 0
        matcher.set_dict(self)

    def discard(self, n: int) -> None:
        """Move the head ``n`` bytes forward and feed them to the matcher."""
        data = self.buf.read(n)
        if len(data) < n:
            raise LZMAError(f"lzma: can't discard {n} bytes")
        self.head += n
        self.matcher.write(data)

    def length(self) -> int:
        """Return the number of history bytes still present in the buffer."""
        return min(self.buf.available(), self.head)

    def dict_len(self) -> int:
        """Return the current length of the dictionary."""
        return min(self.head, self.capacity)

    def available(self) -> int:
        """Return the number of bytes a following write can take."""
        return self.buf.available() - self.dict_len()

    def write(self, data: bytes) -> int:
        """Add data to be coded without moving the head.

        If not everything fits, the part that fits is stored and
        NoSpaceError is raised with the number of bytes written.
        """
        m = self.available()
        short = len(data) > m
        if short:
            data = data[:m]
        n = self.buf.write(data)
        if short:
            raise NoSpaceError(written=n)
        return n

    def pos(self) -> int:
        """Return the position of the head."""
        return self.head

    def byte_at(self, distance: int) -> int:
        """Return the byte ``distance`` positions before the head, or 0."""
        if not 0 < distance <= self.length():
            return 0
        i = self.buf.rear - distance
        if i < 0:
            i += len(self.buf.data)
        return self.buf.data[i]

    def copy_last(self, sink: Any, n: int) -> int:
        """Write the last ``n`` bytes before the head to ``sink``.

        If fewer bytes are available, those are written and NoSpaceError
        is raised with the number of bytes written.
        """
        if n <= 0:
            return 0
        m = self.length()
        short = n > m
        if short:
            n = m
        data = self.buf.data
        rear = self.buf.rear
        i = rear - n
        if i < 0:
            chunk = bytes(data[i + len(data):]) + bytes(data[:rear])
        else:
            chunk = bytes(data[i:rear])
        sink.write(chunk)
        if short:
            raise NoSpaceError(written=n)
        return n

    def buffered(self) -> int:
        """Return the number of bytes waiting to be coded."""
        return self.buf.buffered()