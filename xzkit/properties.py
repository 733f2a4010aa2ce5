"""LZMA literal and position properties and the operations of the coder."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import LZMAError

MIN_LC, MAX_LC = 0, 8
MIN_LP, MAX_LP = 0, 4
MIN_PB, MAX_PB = 0, 4

MAX_PROPERTY_CODE = (MAX_PB + 1) * (MAX_LP + 1) * (MAX_LC + 1) - 1


@dataclass(frozen=True)
class Properties:
    """The parameters lc (literal context bits), lp and pb."""

    lc: int = 0
    lp: int = 0
    pb: int = 0

    @classmethod
    def from_code(cls, code: int) -> "Properties":
        """Decode a properties code byte."""
        if not 0 <= code <= MAX_PROPERTY_CODE:
            raise LZMAError("lzma: invalid properties code")
        lc = code % 9
        code //= 9
        lp = code % 5
        code //= 5
        return cls(lc=lc, lp=lp, pb=code % 5)

    def code(self) -> int:
        """Encode the properties into a single byte."""
        return (self.pb * 5 + self.lp) * 9 + self.lc

    def verify(self) -> None:
        """Raise LZMAError if a parameter is out of range."""
        if not MIN_LC <= self.lc <= MAX_LC:
            raise LZMAError("lzma: lc out of range")
        if not MIN_LP <= self.lp <= MAX_LP:
            raise LZMAError("lzma: lp out of range")
        if not MIN_PB <= self.pb <= MAX_PB:
            raise LZMAError("lzma: pb out of range")

    def __str__(self) -> str:
        return f"LC {self.lc} LP {self.lp} PB {self.pb}"


@dataclass(frozen=True)
class Match:
    """Repeat ``n`` bytes found ``distance`` bytes back."""

    distance: int
    n: int

    def __len__(self) -> int:
        return self.n

    def __str__(self) -> str:
        return f"M{{{self.distance},{self.n}}}"


@dataclass(frozen=True)
class Lit:
    """A single literal byte."""

    b: int

    def __len__(self) -> int:
        return 1

    def __str__(self) -> str:
        ch = chr(self.b)
        shown = ch if ch.isprintable() else "."
        return f"L{{{shown}/{self.b:02x}}}"