"""Chunk headers, chunk types and the chunk state machine of LZMA2."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .errors import LZMAError
from .properties import Properties

MAX_COMPRESSED = 1 << 16
MAX_UNCOMPRESSED = 1 << 21

UNCOMPRESSED_HEADER_LEN = 3

MAX_DICT_CAP = (1 << 32) - 1
MAX_DICT_CAP_CODE = 40


class ChunkType(enum.IntEnum):
    """Kind of an LZMA2 chunk; an internal value, not the header byte."""

    EOS = 0
    UD = 1
    U = 2
    L = 3
    LR = 4
    LRN = 5
    LRND = 6

    def __str__(self) -> str:
        return self.name


_H_EOS = 0
_H_UD = 1
_H_U = 2
_H_L = 1 << 7
_H_LR = 1 << 7 | 1 << 5
_H_LRN = 1 << 7 | 1 << 6
_H_LRND = 1 << 7 | 1 << 6 | 1 << 5

_HEADER_BYTES = {
    ChunkType.EOS: _H_EOS,
    ChunkType.UD: _H_UD,
    ChunkType.U: _H_U,
    ChunkType.L: _H_L,
    ChunkType.LR: _H_LR,
    ChunkType.LRN: _H_LRN,
    ChunkType.LRND: _H_LRND,
}

_UNCOMPRESSED_TYPES = {_H_EOS: ChunkType.EOS, _H_UD: ChunkType.UD, _H_U: ChunkType.U}
_COMPRESSED_TYPES = {
    _H_L: ChunkType.L,
    _H_LR: ChunkType.LR,
    _H_LRN: ChunkType.LRN,
    _H_LRND: ChunkType.LRND,
}


def header_chunk_type(h: int) -> ChunkType:
    """Return the chunk type of a header byte, ignoring its size bits."""
    if h & _H_L == 0:
        try:
            return _UNCOMPRESSED_TYPES[h]
        except KeyError:
            raise LZMAError("lzma: unsupported chunk header byte") from None
    return _COMPRESSED_TYPES[h & _H_LRND]


def header_len(ctype: ChunkType) -> int:
    """Return the length of the chunk header for the given chunk type."""
    if ctype == ChunkType.EOS:
        return 1
    if ctype in (ChunkType.U, ChunkType.UD):
        return UNCOMPRESSED_HEADER_LEN
    if ctype in (ChunkType.L, ChunkType.LR):
        return 5
    if ctype in (ChunkType.LRN, ChunkType.LRND):
        return 6
    raise ValueError(f"unsupported chunk type {ctype!r}")


@dataclass(frozen=True)
class ChunkHeader:
    """Contents of an LZMA2 chunk header.

    ``uncompressed`` and ``compressed`` hold the sizes minus one, as
    they are stored.
    """

    ctype: ChunkType
    uncompressed: int = 0
    compressed: int = 0
    props: Properties = field(default_factory=Properties)

    def to_bytes(self) -> bytes:
        """Encode the header."""
        ctype = ChunkType(self.ctype)
        self.props.verify()
        out = bytearray(header_len(ctype))
        out[0] = _HEADER_BYTES[ctype]
        if ctype == ChunkType.EOS:
            return bytes(out)
        out[1:3] = (self.uncompressed & 0xFFFF).to_bytes(2, "big")
        if ctype <= ChunkType.U:
            return bytes(out)
        out[0] |= (self.uncompressed >> 16) & 0x1F
        out[3:5] = (self.compressed & 0xFFFF).to_bytes(2, "big")
        if ctype <= ChunkType.LR:
            return bytes(out)
        out[5] = self.props.code()
        return bytes(out)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ChunkHeader":
        """Decode a header; ``data`` must have exactly the header length."""
        if not data:
            raise LZMAError("no data")
        ctype = header_chunk_type(data[0])
        n = header_len(ctype)
        if len(data) < n:
            raise LZMAError("incomplete data")
        if len(data) > n:
            raise LZMAError("invalid data length")
        if ctype == ChunkType.EOS:
            return cls(ctype)
        uncompressed = int.from_bytes(data[1:3], "big")
        if ctype <= ChunkType.U:
            return cls(ctype, uncompressed)
        uncompressed |= (data[0] & 0x1F) << 16
        compressed = int.from_bytes(data[3:5], "big")
        if ctype <= ChunkType.LR:
            return cls(ctype, uncompressed, compressed)
        return cls(ctype, uncompressed, compressed, Properties.from_code(data[5]))


def _read_full(stream: Any, n: int) -> bytes:
    data = bytearray()
    while len(data) < n:
        chunk = stream.read(n - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


def read_chunk_header(stream: Any) -> ChunkHeader:
    """Read a chunk header from a binary stream.

    EOFError is raised if the stream ends before the header is complete.
    """
    first = stream.read(1)
    if not first:
        raise EOFError("lzma: end of data before chunk header")
    ctype = header_chunk_type(first[0])
    rest = _read_full(stream, header_len(ctype) - 1)
    if len(rest) < header_len(ctype) - 1:
        raise EOFError("lzma: unexpected end of data in chunk header")
    return ChunkHeader.from_bytes(bytes(first) + rest)


class ChunkState(enum.Enum):
    """State of an LZMA2 chunk sequence."""

    START = "S"
    LZMA = "L"
    RESET = "R"
    UNCOMPRESSED = "U"
    STOP = "T"

    def next(self, ctype: ChunkType) -> "ChunkState":
        """Return the state after a chunk of type ``ctype``."""
        try:
            return _TRANSITIONS[self][ChunkType(ctype)]
        except KeyError:
            raise LZMAError("lzma: unexpected chunk type") from None

    def default_chunk_type(self) -> ChunkType:
        """Return the chunk type a writer uses by default in this state."""
        return _DEFAULT_TYPES[self]


_S, _L, _R, _U, _T = (
    ChunkState.START,
    ChunkState.LZMA,
    ChunkState.RESET,
    ChunkState.UNCOMPRESSED,
    ChunkState.STOP,
)

_TRANSITIONS = {
    _S: {ChunkType.EOS: _T, ChunkType.UD: _R, ChunkType.LRND: _L},
    _L: {
        ChunkType.EOS: _T,
        ChunkType.UD: _R,
        ChunkType.U: _U,
        ChunkType.L: _L,
        ChunkType.LR: _L,
        ChunkType.LRN: _L,
        ChunkType.LRND: _L,
    },
    _R: {
        ChunkType.EOS: _T,
        ChunkType.UD: _R,
        ChunkType.U: _R,
        ChunkType.LRN: _L,
        ChunkType.LRND: _L,
    },
    _U: {
        ChunkType.EOS: _T,
        ChunkType.UD: _R,
        ChunkType.U: _U,
        ChunkType.L: _L,
        ChunkType.LR: _L,
        ChunkType.LRN: _L,
        ChunkType.LRND: _L,
    },
    _T: {},
}

_DEFAULT_TYPES = {
    _S: ChunkType.LRND,
    _L: ChunkType.L,
    _U: ChunkType.L,
    _R: ChunkType.LRN,
    _T: ChunkType.EOS,
}


def _decode_dict_cap(c: int) -> int:
    return (2 | (c & 1)) << (11 + ((c >> 1) & 0x1F))


def decode_dict_cap(c: int) -> int:
    """Decode a dictionary capacity code; codes above 40 are invalid."""
    if c >= MAX_DICT_CAP_CODE:
        if c == MAX_DICT_CAP_CODE:
            return MAX_DICT_CAP
        raise LZMAError("lzma: invalid dictionary size code")
    return _decode_dict_cap(c)


def encode_dict_cap(n: int) -> int:
    """Return the code of the smallest capacity greater or equal ``n``."""
    a, b = 0, MAX_DICT_CAP_CODE
    while a < b:
        c = a + ((b - a) >> 1)
        m = _decode_dict_cap(c)
        if n <= m:
            if n == m:
                return c
            b = c
        else:
            a = c + 1
    return a