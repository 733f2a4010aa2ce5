"""Encoder compressing the data of an encoder dictionary into LZMA."""

from __future__ import annotations

from typing import Any, Union

from .codecs import MAX_DISTANCE, MAX_MATCH_LEN, MIN_DISTANCE, MIN_MATCH_LEN
from .encoderdict import EncoderDict
from .errors import LimitError, NoSpaceError
from .properties import Lit, Match
from .rangecoder import RangeEncoder
from .state import State

OP_LEN_MARGIN = 16

EOS_MATCH = Match(distance=MAX_DISTANCE, n=MIN_MATCH_LEN)


class Encoder:
    """Turns buffered data into LZMA operations written by a range encoder.

    ``writer`` may be a LimitedByteWriter, in which case LimitError is
    raised once its limit would not leave room to close the stream.
    """

    def __init__(
        self, writer: Any, state: State, dictionary: EncoderDict, eos_marker: bool = False
    ) -> None:
        self.re = RangeEncoder(writer)
        self.dict = dictionary
        self.state = state
        self.marker = bool(eos_marker)
        self.start = dictionary.pos()
        self.margin = OP_LEN_MARGIN + (5 if self.marker else 0)

    def write(self, data: bytes) -> int:
        """Buffer ``data``, compressing to make room, and return its length.

        If the writer limit is reached, LimitError is raised; its
        ``written`` attribute tells how many bytes were accepted.
        """
        n = 0
        while True:
            try:
                n += self.dict.write(data[n:])
                return n
            except NoSpaceError as err:
                n += err.written
            try:
                self._compress(everything=False)
            except LimitError as err:
                err.written = n
                raise

    def reopen(self, writer: Any) -> None:
        """Continue with a new byte writer, keeping state and dictionary."""
        self.re = RangeEncoder(writer)
        self.start = self.dict.pos()

    def _write_literal(self, op: Lit) -> None:
        s = self.state
        d = self.dict
        state, state2, _ = s.states(d.pos())
        self.re.encode_bit(0, s.is_match, state2)
        lit_state = s.lit_state(d.byte_at(1), d.pos())
        match = d.byte_at(s.rep[0] + 1)
        s.lit_codec.encode(self.re, op.b, state, match, lit_state)
        s.update_literal()

    def _write_match(self, m: Match) -> None:
        s = self.state
        re = self.re
        if not MIN_DISTANCE <= m.distance <= MAX_DISTANCE:
            raise ValueError(f"match distance {m.distance} out of range")
        dist = m.distance - MIN_DISTANCE
        if not MIN_MATCH_LEN <= m.n <= MAX_MATCH_LEN and not (
            dist == s.rep[0] and m.n == 1
        ):
            raise ValueError(
                f"match length {m.n} out of range; dist {dist} rep[0] {s.rep[0]}"
            )
        state, state2, pos_state = s.states(self.dict.pos())
        re.encode_bit(1, s.is_match, state2)
        g = next((i for i in range(4) if s.rep[i] == dist), 4)
        re.encode_bit(int(g < 4), s.is_rep, state)
        n = m.n - MIN_MATCH_LEN
        if g == 4:
            s.rep[3], s.rep[2], s.rep[1], s.rep[0] = s.rep[2], s.rep[1], s.rep[0], dist
            s.update_match()
            s.len_codec.encode(re, n, pos_state)
            s.dist_codec.encode(re, dist, n)
            return
        re.encode_bit(int(g != 0), s.is_rep_g0, state)
        if g == 0:
            long_rep = m.n != 1
            re.encode_bit(int(long_rep), s.is_rep_g0_long, state2)
            if not long_rep:
                s.update_short_rep()
                return
        else:
            re.encode_bit(int(g != 1), s.is_rep_g1, state)
            if g != 1:
                re.encode_bit(int(g != 2), s.is_rep_g2, state)
                if g != 2:
                    s.rep[3] = s.rep[2]
                s.rep[2] = s.rep[1]
            s.rep[1] = s.rep[0]
            s.rep[0] = dist
        s.update_rep()
        s.rep_len_codec.encode(re, n, pos_state)

    def _write_op(self, op: Union[Lit, Match]) -> None:
        if self.re.available() < self.margin:
            raise LimitError()
        if isinstance(op, Lit):
            self._write_literal(op)
        else:
            self._write_match(op)

    def _compress(self, everything: bool) -> None:
        keep = 0 if everything else MAX_MATCH_LEN - 1
        d = self.dict
        matcher = d.matcher
        while d.buffered() > keep:
            op = matcher.next_op(self.state.rep)
            self._write_op(op)
            d.discard(len(op))

    def close(self) -> None:
        """Compress what fits, write the marker if requested and flush.

        If the writer limit is reached, the rest stays in the dictionary.
        """
        try:
            self._compress(everything=True)
        except LimitError:
            pass
        if self.marker:
            self._write_match(EOS_MATCH)
        self.re.close()

    def compressed(self) -> int:
        """Return the number of input bytes compressed since the last (re)start."""
        return self.dict.pos() - self.start