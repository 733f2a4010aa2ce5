"""Decoder of a raw LZMA stream that carries no header."""

from __future__ import annotations

from typing import Any, Optional, Union

from .codecs import MIN_DISTANCE, MIN_MATCH_LEN, MAX_MATCH_LEN
from .decoderdict import DecoderDict
from .errors import LZMAError
from .properties import Lit, Match
from .rangecoder import RangeDecoder
from .state import State

_EOS_DIST = 0xFFFFFFFF
_UNEXPECTED_EOF = "lzma: unexpected end of compressed data"
_DATA_AFTER_EOS = "lzma: data after end of stream marker"
_WRONG_SIZE = "lzma: wrong uncompressed data size"


class Decoder:
    """Decodes operations from a range decoder into a decoder dictionary.

    ``size`` is the expected number of uncompressed bytes; a negative
    value means the stream ends with an end-of-stream marker.
    """

    def __init__(
        self, reader: Any, state: State, dictionary: DecoderDict, size: int
    ) -> None:
        self.rd = RangeDecoder(reader)
        self.state = state
        self.dict = dictionary
        self.size = size
        self.start = dictionary.pos()
        self.eos_marker = False
        self._eos = False

    def reopen(self, reader: Any, size: int) -> None:
        """Continue with a new byte reader and a new expected size."""
        self.rd = RangeDecoder(reader)
        self.start = self.dict.pos()
        self.size = size
        self._eos = False

    def _decode_literal(self) -> Lit:
        s = self.state
        lit_state = s.lit_state(self.dict.byte_at(1), self.dict.head)
        match = self.dict.byte_at(s.rep[0] + 1)
        return Lit(s.lit_codec.decode(self.rd, s.state, match, lit_state))

    def _read_op(self) -> Optional[Union[Lit, Match]]:
        """Decode the next operation; None signals the end-of-stream marker."""
        s = self.state
        rd = self.rd
        state, state2, pos_state = s.states(self.dict.head)

        if rd.decode_bit(s.is_match, state2) == 0:
            op = self._decode_literal()
            s.update_literal()
            return op

        if rd.decode_bit(s.is_rep, state) == 0:
            # simple match
            s.rep[3], s.rep[2], s.rep[1] = s.rep[2], s.rep[1], s.rep[0]
            s.update_match()
            n = s.len_codec.decode(rd, pos_state)
            s.rep[0] = s.dist_codec.decode(rd, n)
            if s.rep[0] == _EOS_DIST:
                self.eos_marker = True
                return None
            return Match(distance=s.rep[0] + MIN_DISTANCE, n=n + MIN_MATCH_LEN)

        dist = s.rep[0]
        if rd.decode_bit(s.is_rep_g0, state) == 0:
            if rd.decode_bit(s.is_rep_g0_long, state2) == 0:
                s.update_short_rep()
                return Match(distance=dist + MIN_DISTANCE, n=1)
        else:
            if rd.decode_bit(s.is_rep_g1, state) == 0:
                dist = s.rep[1]
            else:
                if rd.decode_bit(s.is_rep_g2, state) == 0:
                    dist = s.rep[2]
                else:
                    dist = s.rep[3]
                    s.rep[3] = s.rep[2]
                s.rep[2] = s.rep[1]
            s.rep[1] = s.rep[0]
            s.rep[0] = dist
        n = s.rep_len_codec.decode(rd, pos_state)
        s.update_rep()
        return Match(distance=dist + MIN_DISTANCE, n=n + MIN_MATCH_LEN)

    def _apply(self, op: Union[Lit, Match]) -> None:
        if isinstance(op, Match):
            self.dict.write_match(op.distance, op.n)
        else:
            self.dict.write_byte(op.b)

    def _decompress(self) -> None:
        """Fill the dictionary until it runs short of space or the stream ends."""
        if self._eos:
            return
        while self.dict.available() >= MAX_MATCH_LEN:
            try:
                op = self._read_op()
            except EOFError as err:
                self._eos = True
                raise EOFError(_UNEXPECTED_EOF) from err
            if op is None:
                self._eos = True
                if not self.rd.possibly_at_end():
                    raise LZMAError(_DATA_AFTER_EOS)
                if self.size >= 0 and self.size != self.decompressed():
                    raise LZMAError(_WRONG_SIZE)
                return
            self._apply(op)
            if self.size >= 0 and self.decompressed() >= self.size:
                self._eos = True
                if self.decompressed() > self.size:
                    raise LZMAError(_WRONG_SIZE)
                if not self.rd.possibly_at_end():
                    try:
                        extra = self._read_op()
                    except EOFError as err:
                        raise EOFError(_UNEXPECTED_EOF) from err
                    if extra is not None:
                        raise LZMAError(_WRONG_SIZE)
                return

    def read(self, size: int = -1) -> bytes:
        """Return up to ``size`` decoded bytes, all remaining if negative.

        An empty result means the end of the stream.
        """
        out = bytearray()
        while size < 0 or len(out) < size:
            want = self.dict.buf.buffered() if size < 0 else size - len(out)
            chunk = self.dict.read(want)
            if not chunk and self._eos:
                break
            out += chunk
            if 0 <= size <= len(out):
                break
            self._decompress()
        return bytes(out)

    def decompressed(self) -> int:
        """Return the number of bytes decoded since the last (re)start."""
        return self.dict.pos() - self.start