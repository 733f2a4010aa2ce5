"""Reader for LZMA2 chunk sequences."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional, Union

from .chunks import ChunkState, ChunkType, read_chunk_header
from .decoder import Decoder
from .decoderdict import MAX_DICT_CAP, MIN_DICT_CAP, DecoderDict
from .errors import LZMAError
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024


@dataclass
class Reader2Config:
    """Parameters of the LZMA2 reader; zero means default."""

    dict_cap: int = 0

    def verify(self) -> None:
        """Fill in defaults and raise LZMAError for invalid values."""
        if self.dict_cap == 0:
            self.dict_cap = DEFAULT_DICT_CAP
        if not MIN_DICT_CAP <= self.dict_cap <= MAX_DICT_CAP:
            raise LZMAError("lzma: dictionary capacity is out of range")


class _LimitedByteReader:
    """Hands out at most ``limit`` bytes of a stream, one at a time."""

    def __init__(self, stream: Any, limit: int) -> None:
        self.stream = stream
        self.remaining = limit

    def read_byte(self) -> int:
        if self.remaining <= 0:
            raise EOFError("lzma: compressed chunk data exhausted")
        data = self.stream.read(1)
        if not data:
            raise EOFError("lzma: unexpected end of compressed chunk")
        self.remaining -= 1
        return data[0]


class _UncompressedReader:
    """Copies the data of an uncompressed chunk through the dictionary."""

    def __init__(self, stream: Any, dictionary: DecoderDict, size: int) -> None:
        self.stream = stream
        self.dict = dictionary
        self.remaining = size

    def _fill(self) -> bool:
        if self.remaining == 0:
            return False
        want = min(self.dict.available(), self.remaining)
        data = self.stream.read(want)
        if not data:
            raise EOFError("lzma: unexpected end of uncompressed chunk")
        self.dict.write(data)
        self.remaining -= len(data)
        return True

    def read(self, size: int = -1) -> bytes:
        out = bytearray()
        while size < 0 or len(out) < size:
            want = self.dict.buf.buffered() if size < 0 else size - len(out)
            out += self.dict.read(want)
            if 0 <= size <= len(out):
                break
            if not self._fill():
                break
        return bytes(out)


class Reader2:
    """Decompresses an LZMA2 chunk sequence.

    The first chunk must reset the dictionary and the first compressed
    chunk must set the properties. The sequence need not end with an
    end-of-stream chunk; a stream ending early raises EOFError.
    """

    def __init__(self, stream: Any, config: Optional[Reader2Config] = None) -> None:
        config = replace(config) if config is not None else Reader2Config()
        config.verify()
        self._stream = stream
        self._dict = DecoderDict(config.dict_cap)
        self._cstate = ChunkState.START
        self._decoder: Optional[Decoder] = None
        self._chunk_reader: Optional[Union[Decoder, _UncompressedReader]] = None
        self._err: Optional[Exception] = None
        try:
            self._start_chunk()
        except (LZMAError, EOFError) as err:
            self._err = err

    def _start_chunk(self) -> None:
        self._chunk_reader = None
        header = read_chunk_header(self._stream)
        self._cstate = self._cstate.next(header.ctype)
        if self._cstate is ChunkState.STOP:
            return
        ctype = header.ctype
        if ctype in (ChunkType.UD, ChunkType.LRND):
            self._dict.reset()
        size = header.uncompressed + 1
        if ctype in (ChunkType.U, ChunkType.UD):
            self._chunk_reader = _UncompressedReader(self._stream, self._dict, size)
            return
        reader = _LimitedByteReader(self._stream, header.compressed + 1)
        if self._decoder is None:
            self._decoder = Decoder(reader, State(header.props), self._dict, size)
        else:
            if ctype is ChunkType.LR:
                self._decoder.state.reset()
            elif ctype in (ChunkType.LRN, ChunkType.LRND):
                self._decoder.state = State(header.props)
            self._decoder.reopen(reader, size)
        self._chunk_reader = self._decoder

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` uncompressed bytes, all if negative.

        An empty result means the end of the sequence. An error met
        after some data was produced is raised by the following call.
        """
        if self._err is not None:
            raise self._err
        out = bytearray()
        while (size < 0 or len(out) < size) and self._chunk_reader is not None:
            want = -1 if size < 0 else size - len(out)
            try:
                chunk = self._chunk_reader.read(want)
                if not chunk:
                    self._start_chunk()
            except (LZMAError, EOFError) as err:
                self._err = err
                if out:
                    break
                raise
            out += chunk
        return bytes(out)

    def eos(self) -> bool:
        """Return True if an end-of-stream chunk has been read."""
        return self._cstate is ChunkState.STOP