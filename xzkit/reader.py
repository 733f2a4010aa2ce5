"""Reader for the classic LZMA file format."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

from .decoder import Decoder
from .decoderdict import MAX_DICT_CAP, MIN_DICT_CAP, DecoderDict
from .errors import LZMAError
from .header import HEADER_LEN, Header
from .rangecoder import byte_reader
from .state import State

DEFAULT_DICT_CAP = 8 * 1024 * 1024


@dataclass
class ReaderConfig:
    """Parameters of the classic LZMA reader; zero means default."""

    dict_cap: int = 0

    def verify(self) -> None:
        """Fill in defaults and raise LZMAError for invalid values."""
        if self.dict_cap == 0:
            self.dict_cap = DEFAULT_DICT_CAP
        if not MIN_DICT_CAP <= self.dict_cap <= MAX_DICT_CAP:
            raise LZMAError("lzma: dictionary capacity is out of range")


def _read_full(stream: Any, n: int) -> bytes:
    data = bytearray()
    while len(data) < n:
        chunk = stream.read(n - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


class Reader:
    """Decompresses an LZMA file; the header is read on construction."""

    def __init__(self, stream: Any, config: Optional[ReaderConfig] = None) -> None:
        config = replace(config) if config is not None else ReaderConfig()
        config.verify()
        data = _read_full(stream, HEADER_LEN)
        if len(data) < HEADER_LEN:
            raise EOFError("lzma: unexpected EOF")
        header = Header.from_bytes(data)
        if header.dict_cap < MIN_DICT_CAP:
            header = replace(header, dict_cap=MIN_DICT_CAP)
        self.header = header
        dict_cap = max(header.dict_cap, config.dict_cap)
        state = State(header.properties)
        dictionary = DecoderDict(dict_cap)
        self._decoder = Decoder(byte_reader(stream), state, dictionary, header.size)

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` uncompressed bytes; empty at the end."""
        return self._decoder.read(size)

    def eos_marker(self) -> bool:
        """Return True if an end-of-stream marker has been encountered."""
        return self._decoder.eos_marker