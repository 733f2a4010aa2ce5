"""The LZMA2 filter entry of an xz block header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .chunks import decode_dict_cap, encode_dict_cap
from .errors import LZMAError
from .reader2 import Reader2, Reader2Config
from .writer2 import Writer2, Writer2Config

LZMA_FILTER_ID = 0x21
LZMA_FILTER_LEN = 3


@dataclass(frozen=True)
class LzmaFilter:
    """LZMA2 filter information with its dictionary capacity."""

    dict_cap: int

    @property
    def filter_id(self) -> int:
        """Return the filter ID of LZMA2."""
        return LZMA_FILTER_ID

    def __str__(self) -> str:
        return f"LZMA dict cap {self.dict_cap:#x}"

    def to_bytes(self) -> bytes:
        """Encode the filter entry."""
        return bytes([LZMA_FILTER_ID, 1, encode_dict_cap(self.dict_cap)])

    @classmethod
    def from_bytes(cls, data: bytes) -> "LzmaFilter":
        """Decode a filter entry."""
        if len(data) != LZMA_FILTER_LEN:
            raise LZMAError("xz: data for LZMA2 filter has wrong length")
        if data[0] != LZMA_FILTER_ID:
            raise LZMAError("xz: wrong LZMA2 filter id")
        if data[1] != 1:
            raise LZMAError("xz: wrong LZMA2 filter size")
        try:
            dict_cap = decode_dict_cap(data[2])
        except LZMAError:
            raise LZMAError("xz: wrong LZMA2 dictionary size property") from None
        return cls(dict_cap)

    def _checked_dict_cap(self) -> int:
        dc = int(self.dict_cap)
        if dc < 1:
            raise LZMAError("xz: LZMA2 filter parameter dictionary capacity overflow")
        return dc

    def reader(self, stream: Any, dict_cap: Optional[int] = None) -> Reader2:
        """Return a reader decompressing the LZMA2 data in ``stream``."""
        config = Reader2Config(dict_cap=dict_cap or 0)
        dc = self._checked_dict_cap()
        if dc > config.dict_cap:
            config.dict_cap = dc
        return Reader2(stream, config)

    def writer(self, stream: Any, config: Any = None) -> Writer2:
        """Return a writer compressing into ``stream`` as LZMA2.

        ``config`` may be any object with the attributes properties,
        dict_cap, buf_size and matcher.
        """
        w2 = Writer2Config()
        if config is not None:
            w2 = Writer2Config(
                properties=config.properties,
                dict_cap=config.dict_cap,
                buf_size=config.buf_size,
                matcher=config.matcher,
            )
        dc = self._checked_dict_cap()
        if dc > w2.dict_cap:
            w2.dict_cap = dc
        return Writer2(stream, w2)

    def is_last(self) -> bool:
        """Return True: LZMA2 must be the last filter of a block."""
        return True