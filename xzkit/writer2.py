"""Writer for LZMA2 chunk sequences."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from .chunks import (
    MAX_COMPRESSED,
    MAX_UNCOMPRESSED,
    UNCOMPRESSED_HEADER_LEN,
    ChunkHeader,
    ChunkState,
    ChunkType,
    header_len,
)
from .codecs import MAX_MATCH_LEN
from .decoderdict import MAX_DICT_CAP, MIN_DICT_CAP
from .encoder import Encoder
from .encoderdict import EncoderDict
from .errors import LimitedByteWriter, LimitError, LZMAError
from .matchalgorithm import MatchAlgorithm
from .properties import Properties
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024
DEFAULT_BUF_SIZE = 4096


@dataclass
class Writer2Config:
    """Parameters of the LZMA2 writer; zero values mean default."""

    properties: Optional[Properties] = None
    dict_cap: int = 0
    buf_size: int = 0
    matcher: MatchAlgorithm = MatchAlgorithm.HASH_TABLE4

    def _fill(self) -> None:
        if self.properties is None:
            self.properties = Properties(lc=3, lp=0, pb=2)
        if self.dict_cap == 0:
            self.dict_cap = DEFAULT_DICT_CAP
        if self.buf_size == 0:
            self.buf_size = DEFAULT_BUF_SIZE

    def verify(self) -> None:
        """Fill in defaults and raise LZMAError for invalid values."""
        self._fill()
        self.properties.verify()
        if not MIN_DICT_CAP <= self.dict_cap <= MAX_DICT_CAP:
            raise LZMAError("lzma: dictionary capacity is out of range")
        if self.buf_size < MAX_MATCH_LEN:
            raise LZMAError("lzma: lookahead buffer size too small")
        if self.properties.lc + self.properties.lp > 4:
            raise LZMAError("lzma: sum of lc and lp exceeds 4")
        try:
            self.matcher = MatchAlgorithm(self.matcher)
        except ValueError:
            raise LZMAError("lzma: unsupported match algorithm value") from None


class _ChunkBuffer:
    """Collects the compressed bytes of the current chunk."""

    def __init__(self) -> None:
        self.data = bytearray()

    def write_byte(self, c: int) -> None:
        self.data.append(c)

    def write(self, data: bytes) -> int:
        self.data += data
        return len(data)

    def __len__(self) -> int:
        return len(self.data)


class Writer2:
    """Compresses data into an LZMA2 chunk sequence.

    Data is buffered; flush writes all pending chunks, close also
    appends the end-of-stream chunk. Output that was only flushed can
    be followed by the output of another writer.
    """

    def __init__(self, stream: Any, config: Optional[Writer2Config] = None) -> None:
        config = replace(config) if config is not None else Writer2Config()
        config.verify()
        self.config = config
        self._stream = stream
        self._start = State(config.properties)
        self._cstate = ChunkState.START
        self._ctype = self._cstate.default_chunk_type()
        self._buf = _ChunkBuffer()
        matcher = config.matcher.new(config.dict_cap)
        dictionary = EncoderDict(config.dict_cap, config.buf_size, matcher)
        self._encoder = Encoder(
            LimitedByteWriter(self._buf, MAX_COMPRESSED),
            self._start.copy(),
            dictionary,
            eos_marker=False,
        )

    def _written(self) -> int:
        return self._encoder.compressed() + self._encoder.dict.buffered()

    def write(self, data: bytes) -> int:
        """Buffer and compress ``data``; return the number of bytes taken."""
        if self._cstate is ChunkState.STOP:
            raise LZMAError("lzma: writer closed")
        data = bytes(data)
        n = 0
        while n < len(data):
            m = MAX_UNCOMPRESSED - self._written()
            if m <= 0:
                raise LZMAError("lzma: maxUncompressed reached")
            piece = data[n:n + m]
            try:
                k = self._encoder.write(piece)
                limited = False
            except LimitError as err:
                k = getattr(err, "written", 0) or 0
                limited = True
            n += k
            if limited or k == m:
                self._flush_chunk()
        return n

    def _write_uncompressed_chunk(self) -> None:
        u = self._encoder.compressed()
        if u <= 0:
            raise LZMAError("lzma: can't write empty uncompressed chunk")
        if u > MAX_UNCOMPRESSED:
            raise LZMAError("overrun of uncompressed data limit")
        self._ctype = ChunkType.UD if self._ctype is ChunkType.LRND else ChunkType.U
        # the uncompressed chunk leaves the coder state as it was
        self._encoder.state = self._start
        header = ChunkHeader(self._ctype, uncompressed=u - 1)
        self._stream.write(header.to_bytes())
        self._encoder.dict.copy_last(self._stream, u)

    def _write_compressed_chunk(self) -> None:
        u = self._encoder.compressed()
        if u <= 0:
            raise LZMAError("writeCompressedChunk: empty chunk")
        if u > MAX_UNCOMPRESSED:
            raise LZMAError("overrun of uncompressed data limit")
        c = len(self._buf)
        if c <= 0:
            raise LZMAError("no compressed data")
        if c > MAX_COMPRESSED:
            raise LZMAError("overrun of compressed data limit")
        header = ChunkHeader(
            self._ctype,
            uncompressed=u - 1,
            compressed=c - 1,
            props=self._encoder.state.properties,
        )
        self._stream.write(header.to_bytes())
        self._stream.write(bytes(self._buf.data))

    def _write_chunk(self) -> None:
        u = UNCOMPRESSED_HEADER_LEN + self._encoder.compressed()
        c = header_len(self._ctype) + len(self._buf)
        if u < c:
            self._write_uncompressed_chunk()
        else:
            self._write_compressed_chunk()

    def _flush_chunk(self) -> None:
        if self._written() == 0:
            return
        self._encoder.close()
        self._write_chunk()
        self._buf = _ChunkBuffer()
        self._encoder.reopen(LimitedByteWriter(self._buf, MAX_COMPRESSED))
        self._cstate = self._cstate.next(self._ctype)
        self._ctype = self._cstate.default_chunk_type()
        self._start = self._encoder.state.copy()

    def flush(self) -> None:
        """Write all buffered data as chunks to the underlying stream."""
        if self._cstate is ChunkState.STOP:
            raise LZMAError("lzma: writer closed")
        while self._written() > 0:
            self._flush_chunk()

    def close(self) -> None:
        """Flush and terminate the sequence with an end-of-stream chunk."""
        if self._cstate is ChunkState.STOP:
            raise LZMAError("lzma: writer closed")
        self.flush()
        self._stream.write(b"\x00")
        self._cstate = ChunkState.STOP

    def __enter__(self) -> "Writer2":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.close()
        return False