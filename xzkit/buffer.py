"""Circular byte buffer used by the dictionaries."""

from __future__ import annotations

from .errors import LZMAError, NoSpaceError


def prefix_len(a: bytes, b: bytes) -> int:
    """Return the length of the common prefix of ``a`` and ``b``."""
    for i, (x, y) in enumerate(zip(a, b)):
        if x != y:
            return i
    return min(len(a), len(b))


class Buffer:
    """Circular buffer; one slot is kept free to tell full from empty."""

    def __init__(self, size: int) -> None:
        self.data = bytearray(size + 1)
        self.front = 0
        self.rear = 0

    def capacity(self) -> int:
        """Return the number of bytes the buffer can hold."""
        return len(self.data) - 1

    def reset(self) -> None:
        """Empty the buffer."""
        self.front = 0
        self.rear = 0

    def buffered(self) -> int:
        """Return the number of bytes waiting to be read."""
        delta = self.front - self.rear
        if delta < 0:
            delta += len(self.data)
        return delta

    def available(self) -> int:
        """Return the number of bytes that can be written."""
        delta = self.rear - 1 - self.front
        if delta < 0:
            delta += len(self.data)
        return delta

    def _add_index(self, i: int, n: int) -> int:
        i += n - len(self.data)
        if i < 0:
            i += len(self.data)
        return i

    def peek(self, size: int) -> bytes:
        """Return up to ``size`` buffered bytes without consuming them."""
        n = min(size, self.buffered())
        end = self.rear + n
        if end <= len(self.data):
            return bytes(self.data[self.rear:end])
        return bytes(self.data[self.rear:]) + bytes(self.data[: end - len(self.data)])

    def read(self, size: int) -> bytes:
        """Consume and return up to ``size`` buffered bytes."""
        data = self.peek(size)
        self.rear = self._add_index(self.rear, len(data))
        return data

    def discard(self, n: int) -> int:
        """Skip ``n`` buffered bytes and return the number skipped.

        If fewer bytes are buffered, all of them are skipped and
        LZMAError is raised.
        """
        if n < 0:
            raise ValueError("discard: negative argument")
        m = self.buffered()
        if m < n:
            self.rear = self._add_index(self.rear, m)
            raise LZMAError("discard: discarded fewer bytes than requested")
        self.rear = self._add_index(self.rear, n)
        return n

    def write(self, data: bytes) -> int:
        """Store ``data`` and return its length.

        If not all of it fits, the part that fits is stored and
        NoSpaceError is raised carrying the number of bytes written.
        """
        m = self.available()
        n = len(data)
        short = m < n
        if short:
            n = m
            data = data[:m]
        first = min(n, len(self.data) - self.front)
        self.data[self.front:self.front + first] = data[:first]
        if first < n:
            self.data[: n - first] = data[first:]
        self.front = self._add_index(self.front, n)
        if short:
            raise NoSpaceError(written=n)
        return n

    def write_byte(self, c: int) -> None:
        """Store a single byte or raise NoSpaceError."""
        if self.available() < 1:
            raise NoSpaceError()
        self.data[self.front] = c
        self.front = self._add_index(self.front, 1)

    def match_len(self, distance: int, data: bytes) -> int:
        """Length of the common prefix of ``data`` and the bytes ``distance`` before rear."""
        n = 0
        i = self.rear - distance
        if i < 0:
            n = prefix_len(data, self.data[len(self.data) + i:])
            if n < -i:
                return n
            data = data[n:]
            i = 0
        return n + prefix_len(data, self.data[i:])