"""Header of the classic LZMA file format."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .decoderdict import MAX_DICT_CAP
from .errors import LZMAError
from .properties import Properties

HEADER_LEN = 13
NO_HEADER_SIZE = (1 << 64) - 1


@dataclass(frozen=True)
class Header:
    """Properties, dictionary capacity and uncompressed size (-1 if unknown)."""

    properties: Properties = field(default_factory=Properties)
    dict_cap: int = 0
    size: int = -1

    def to_bytes(self) -> bytes:
        """Encode the header into its 13-byte form."""
        self.properties.verify()
        if not 0 <= self.dict_cap <= MAX_DICT_CAP:
            raise LZMAError(f"lzma: DictCap {self.dict_cap} out of range")
        size = self.size if self.size > 0 else NO_HEADER_SIZE
        return struct.pack("<BIQ", self.properties.code(), self.dict_cap, size)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Header":
        """Decode a 13-byte header."""
        if len(data) != HEADER_LEN:
            raise LZMAError("lzma: header data has wrong length")
        code, dict_cap, s = struct.unpack("<BIQ", bytes(data))
        properties = Properties.from_code(code)
        if s == NO_HEADER_SIZE:
            size = -1
        elif s >= 1 << 63:
            raise LZMAError("LZMA header: uncompressed size out of int64 range")
        else:
            size = s
        return cls(properties=properties, dict_cap=dict_cap, size=size)


def _valid_dict_cap(dict_cap: int) -> bool:
    if dict_cap == MAX_DICT_CAP:
        return True
    return any(
        dict_cap in (1 << n, (1 << n) + (1 << (n - 1))) for n in range(10, 32)
    )


def valid_header(data: bytes) -> bool:
    """Check for a plausible LZMA file header.

    Dictionary capacities must be 2^n or 2^n+2^(n-1) with n >= 10, or
    2^32-1; an explicit size must not exceed 256 GiB.
    """
    try:
        h = Header.from_bytes(data)
    except LZMAError:
        return False
    if not _valid_dict_cap(h.dict_cap):
        return False
    return h.size < 0 or h.size <= 1 << 38