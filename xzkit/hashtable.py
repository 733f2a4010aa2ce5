"""Hash-chain matcher finding earlier occurrences of the bytes at the head."""

from __future__ import annotations

from collections import deque
from typing import List, Optional, Sequence, Union

from .codecs import MAX_MATCH_LEN, MIN_DISTANCE
from .errors import LZMAError
from .properties import Lit, Match
from .rangecoder import nlz32

MAX_MATCHES = 16
SHORT_DISTS = 8

MIN_TABLE_EXPONENT = 9
MAX_TABLE_EXPONENT = 20

_HASH_PRIME = 0x100000001B3
_MASK64 = (1 << 64) - 1


class _Roller:
    """Hash over the last ``n`` bytes rolled in."""

    def __init__(self, n: int) -> None:
        self.window: deque = deque(maxlen=n)

    def roll_byte(self, b: int) -> int:
        self.window.append(b)
        h = 0
        for c in self.window:
            h = (h * _HASH_PRIME + c) & _MASK64
        return h


def hash_table_exponent(n: int) -> int:
    """Derive the hash table exponent from the dictionary capacity."""
    e = 30 - nlz32(n)
    return max(MIN_TABLE_EXPONENT, min(MAX_TABLE_EXPONENT, e))


class HashTable:
    """Chained hash table over a circular list of position deltas."""

    def __init__(self, capacity: int, word_len: int) -> None:
        if capacity <= 0:
            raise LZMAError("newHashTable: capacity must not be negative")
        exp = hash_table_exponent(capacity)
        if not 1 <= word_len <= 4:
            raise LZMAError("newHashTable: argument wordLen out of range")
        self.dict = None
        self.table: List[int] = [0] * (1 << exp)
        self.data: List[int] = [0] * capacity
        self.front = 0
        self.mask = (1 << exp) - 1
        self.hoff = -word_len
        self.word_len = word_len
        self._wr = _Roller(word_len)
        self._hr = _Roller(word_len)

    def set_dict(self, dictionary) -> None:
        """Attach the encoder dictionary."""
        self.dict = dictionary

    def _buffered(self) -> int:
        n = self.hoff + 1
        if n <= 0:
            return 0
        return min(n, len(self.data))

    def _put_delta(self, delta: int) -> None:
        self.data[self.front] = delta
        self.front += 1
        if self.front >= len(self.data):
            self.front = 0

    def _put_entry(self, h: int, pos: int) -> None:
        if pos < 0:
            return
        i = h & self.mask
        old = self.table[i] - 1
        self.table[i] = pos + 1
        delta = 0
        if old >= 0:
            delta = pos - old
            if delta > 0xFFFFFFFF or delta > self._buffered():
                delta = 0
        self._put_delta(delta)

    def write_byte(self, b: int) -> None:
        """Hash the word ending with ``b`` and record its position."""
        h = self._wr.roll_byte(b)
        self.hoff += 1
        self._put_entry(h, self.hoff)

    def write(self, data: bytes) -> int:
        """Record all words ending in ``data``."""
        for b in data:
            self.write_byte(b)
        return len(data)

    def _get_matches(self, h: int, limit: int) -> List[int]:
        positions: List[int] = []
        if self.hoff < 0 or limit <= 0:
            return positions
        buffered = self._buffered()
        tail_pos = self.hoff + 1 - buffered
        rear = self.front - buffered
        if rear >= 0:
            rear -= len(self.data)
        delta = self.table[h & self.mask] - 1 - tail_pos
        while delta >= 0:
            positions.append(tail_pos + delta)
            if len(positions) >= limit:
                break
            i = rear + delta
            if i < 0:
                i += len(self.data)
            u = self.data[i]
            if u == 0:
                break
            delta -= u
        return positions

    def _hash(self, word: bytes) -> int:
        h = 0
        for b in word:
            h = self._hr.roll_byte(b)
        return h

    def matches(self, word: bytes, limit: int) -> List[int]:
        """Return up to ``limit`` positions of ``word``, most recent first."""
        if len(word) != self.word_len:
            raise ValueError(f"byte slice must have length {self.word_len}")
        return self._get_matches(self._hash(word), limit)

    def next_op(self, rep: Sequence[int]) -> Union[Lit, Match]:
        """Find the next operation for the data at the dictionary head."""
        d = self.dict
        buf = d.buf
        data = buf.peek(MAX_MATCH_LEN)
        if len(data) < self.word_len:
            positions: List[int] = []
        else:
            positions = self.matches(data[: self.word_len], MAX_MATCHES)

        head = d.pos()
        dists = list(range(1, SHORT_DISTS + 1))
        dists.extend(head - pos for pos in positions if head - pos > SHORT_DISTS)

        best: Optional[Match] = None
        best_n = 0
        dict_len = d.dict_len()
        size = len(buf.data)
        for dist in dists:
            if dist > dict_len:
                continue
            # only a match longer than the best one is of interest
            i = (buf.rear - dist + best_n) % size
            if buf.data[i] != data[best_n]:
                continue
            n = buf.match_len(dist, data)
            if n == 0:
                continue
            if n == 1 and dist - MIN_DISTANCE != rep[0]:
                continue
            if n > best_n:
                best = Match(distance=dist, n=n)
                best_n = n
                if n == len(data):
                    break

        if best is None:
            return Lit(data[0])
        return best