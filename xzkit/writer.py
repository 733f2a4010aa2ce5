"""Writer for the classic LZMA file format."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from .codecs import MAX_MATCH_LEN
from .decoderdict import MAX_DICT_CAP, MIN_DICT_CAP
from .encoder import Encoder
from .encoderdict import EncoderDict
from .errors import LZMAError, NoSpaceError
from .header import Header
from .matchalgorithm import MatchAlgorithm
from .properties import Properties
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024
DEFAULT_BUF_SIZE = 4096

_FLUSH_SIZE = 4096


@dataclass
class WriterConfig:
    """Parameters of the classic LZMA writer; zero values mean default.

    A positive ``size`` puts an explicit size into the header. Without
    a size in the header the end-of-stream marker is always written.
    """

    properties: Optional[Properties] = None
    dict_cap: int = 0
    buf_size: int = 0
    matcher: MatchAlgorithm = MatchAlgorithm.HASH_TABLE4
    size_in_header: bool = False
    size: int = 0
    eos_marker: bool = False

    def _fill(self) -> None:
        if self.properties is None:
            self.properties = Properties(lc=3, lp=0, pb=2)
        if self.dict_cap == 0:
            self.dict_cap = DEFAULT_DICT_CAP
        if self.buf_size == 0:
            self.buf_size = DEFAULT_BUF_SIZE
        if self.size > 0:
            self.size_in_header = True
        if not self.size_in_header:
            self.eos_marker = True

    def verify(self) -> None:
        """Fill in defaults and raise LZMAError for invalid values."""
        self._fill()
        self.properties.verify()
        if not MIN_DICT_CAP <= self.dict_cap <= MAX_DICT_CAP:
            raise LZMAError("lzma: dictionary capacity is out of range")
        if self.buf_size < MAX_MATCH_LEN:
            raise LZMAError("lzma: lookahead buffer size too small")
        if self.size_in_header:
            if self.size < 0:
                raise LZMAError("lzma: negative size not supported")
        elif not self.eos_marker:
            raise LZMAError("lzma: EOS marker is required")
        try:
            self.matcher = MatchAlgorithm(self.matcher)
        except ValueError:
            raise LZMAError("lzma: unsupported match algorithm value") from None


def _header_for(config: WriterConfig) -> Header:
    return Header(
        properties=config.properties,
        dict_cap=config.dict_cap,
        size=config.size if config.size_in_header else -1,
    )


class _ByteSink:
    """Collects single bytes and passes them on in larger pieces."""

    def __init__(self, stream: Any) -> None:
        self.stream = stream
        self.pending = bytearray()

    def write_byte(self, c: int) -> None:
        self.pending.append(c)
        if len(self.pending) >= _FLUSH_SIZE:
            self.flush()

    def write(self, data: bytes) -> int:
        self.pending += data
        if len(self.pending) >= _FLUSH_SIZE:
            self.flush()
        return len(data)

    def flush(self) -> None:
        if self.pending:
            self.stream.write(bytes(self.pending))
            self.pending.clear()


class Writer:
    """Compresses data into an LZMA file; the header is written at once.

    Output is buffered; close finishes the stream and flushes it.
    """

    def __init__(self, stream: Any, config: Optional[WriterConfig] = None) -> None:
        config = replace(config) if config is not None else WriterConfig()
        config.verify()
        self.config = config
        self.header = _header_for(config)
        self._sink = _ByteSink(stream)
        self._sink.write(self.header.to_bytes())
        matcher = config.matcher.new(config.dict_cap)
        dictionary = EncoderDict(config.dict_cap, config.buf_size, matcher)
        self._encoder = Encoder(
            self._sink,
            State(self.header.properties),
            dictionary,
            eos_marker=config.eos_marker,
        )
        self._closed = False

    def _taken(self) -> int:
        return self._encoder.compressed() + self._encoder.dict.buffered()

    def write(self, data: bytes) -> int:
        """Compress ``data`` and return the number of bytes taken.

        If the header size would be exceeded, the part that fits is
        taken and NoSpaceError is raised with that count in ``written``.
        """
        if self._closed:
            raise LZMAError("lzma: writer closed")
        data = bytes(data)
        short = False
        if self.header.size >= 0:
            remaining = max(0, self.header.size - self._taken())
            if remaining < len(data):
                data = data[:remaining]
                short = True
        n = self._encoder.write(data)
        if short:
            raise NoSpaceError(written=n)
        return n

    def close(self) -> None:
        """Finish the LZMA stream and flush it; the stream stays open.

        If the header carries a size that has not been reached, LZMAError
        is raised and the writer stays usable.
        """
        if self._closed:
            return
        if self.header.size >= 0 and self._taken() != self.header.size:
            raise LZMAError("lzma: wrong uncompressed data size")
        try:
            self._encoder.close()
        finally:
            self._sink.flush()
        self._closed = True

    def __enter__(self) -> "Writer":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.close()
        return False