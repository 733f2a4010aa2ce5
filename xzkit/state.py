"""Complete adaptive state of the LZMA operation coder."""

from __future__ import annotations

from typing import Tuple

from .codecs import MAX_POS_BITS, DistCodec, LengthCodec, LiteralCodec
from .properties import Properties
from .rangecoder import PROB_INIT

STATES = 12


class State:
    """Probabilities, repeat distances and the state machine value."""

    def __init__(self, properties: Properties) -> None:
        self.properties = properties
        self.reset()

    def reset(self) -> None:
        """Restore all probabilities and counters to their initial values."""
        p = self.properties
        self.rep = [0, 0, 0, 0]
        self.is_match = [PROB_INIT] * (STATES << MAX_POS_BITS)
        self.is_rep_g0_long = [PROB_INIT] * (STATES << MAX_POS_BITS)
        self.is_rep = [PROB_INIT] * STATES
        self.is_rep_g0 = [PROB_INIT] * STATES
        self.is_rep_g1 = [PROB_INIT] * STATES
        self.is_rep_g2 = [PROB_INIT] * STATES
        self.lit_codec = LiteralCodec(p.lc, p.lp)
        self.len_codec = LengthCodec()
        self.rep_len_codec = LengthCodec()
        self.dist_codec = DistCodec()
        self.state = 0
        self.pos_bit_mask = (1 << p.pb) - 1

    def copy(self) -> "State":
        """Return an independent deep copy."""
        clone = State.__new__(State)
        clone.properties = self.properties
        clone.rep = list(self.rep)
        clone.is_match = list(self.is_match)
        clone.is_rep_g0_long = list(self.is_rep_g0_long)
        clone.is_rep = list(self.is_rep)
        clone.is_rep_g0 = list(self.is_rep_g0)
        clone.is_rep_g1 = list(self.is_rep_g1)
        clone.is_rep_g2 = list(self.is_rep_g2)
        clone.lit_codec = self.lit_codec.copy()
        clone.len_codec = self.len_codec.copy()
        clone.rep_len_codec = self.rep_len_codec.copy()
        clone.dist_codec = self.dist_codec.copy()
        clone.state = self.state
        clone.pos_bit_mask = self.pos_bit_mask
        return clone

    def update_literal(self) -> None:
        """Advance the state machine after a literal."""
        if self.state < 4:
            self.state = 0
        elif self.state < 10:
            self.state -= 3
        else:
            self.state -= 6

    def update_match(self) -> None:
        """Advance the state machine after a simple match."""
        self.state = 7 if self.state < 7 else 10

    def update_rep(self) -> None:
        """Advance the state machine after a repeat match."""
        self.state = 8 if self.state < 7 else 11

    def update_short_rep(self) -> None:
        """Advance the state machine after a short repeat."""
        self.state = 9 if self.state < 7 else 11

    def states(self, dict_head: int) -> Tuple[int, int, int]:
        """Return (state, state combined with position state, position state)."""
        pos_state = dict_head & 0xFFFFFFFF & self.pos_bit_mask
        return self.state, (self.state << MAX_POS_BITS) | pos_state, pos_state

    def lit_state(self, prev: int, dict_head: int) -> int:
        """Return the literal state for the previous byte and head position."""
        lp, lc = self.properties.lp, self.properties.lc
        return (((dict_head & 0xFFFFFFFF) & ((1 << lp) - 1)) << lc) | (
            (prev & 0xFF) >> (8 - lc)
        )