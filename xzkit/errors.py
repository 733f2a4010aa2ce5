"""Exceptions shared by the codec and a byte writer with a hard limit."""

from __future__ import annotations

from typing import Any, Callable


class LZMAError(Exception):
    """Base class for all errors raised while encoding or decoding."""


class LimitError(LZMAError):
    """Raised when the limit of a LimitedByteWriter has been reached."""

    def __init__(self, message: str = "limit reached") -> None:
        super().__init__(message)


class NoSpaceError(LZMAError):
    """Raised when a buffer cannot take all the data offered to it.

    The attribute ``written`` tells how many bytes were stored before
    the buffer ran full.
    """

    def __init__(self, message: str = "insufficient space", written: int = 0) -> None:
        super().__init__(message)
        self.written = written


def _byte_sink(sink: Any) -> Callable[[int], Any]:
    if hasattr(sink, "write_byte"):
        return sink.write_byte
    if isinstance(sink, bytearray):
        return sink.append
    write = sink.write
    return lambda c: write(bytes((c,)))


class LimitedByteWriter:
    """Writes single bytes to a sink until ``remaining`` drops to zero.

    The sink may be a bytearray, an object with a ``write_byte`` method
    or a binary file-like object with ``write``.
    """

    def __init__(self, sink: Any, limit: int) -> None:
        self.sink = sink
        self.remaining = limit
        self._put = _byte_sink(sink)

    def write_byte(self, c: int) -> None:
        """Write one byte; raise LimitError once the limit is reached."""
        if self.remaining <= 0:
            raise LimitError()
        self._put(c & 0xFF)
        self.remaining -= 1