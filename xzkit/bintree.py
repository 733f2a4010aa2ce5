"""Binary-tree matcher over the 4-byte words of the recent history."""

from __future__ import annotations

import unicodedata
from typing import Callable, Iterator, List, Sequence, Tuple, Union

from .codecs import MAX_MATCH_LEN, MIN_DISTANCE
from .errors import LZMAError
from .properties import Lit, Match

WORD_LEN = 4
NULL = (1 << 32) - 1
_MASK32 = 0xFFFFFFFF


def xval(data: bytes) -> int:
    """Convert the first four bytes to a big-endian integer, zero padded."""
    return int.from_bytes(bytes(data[:4]).ljust(4, b"\0"), "big")


def _graphic(c: int) -> bool:
    ch = chr(c)
    return ch.isprintable() or unicodedata.category(ch) == "Zs"


def dump_x(x: int) -> str:
    """Render a word value as four characters, dots for non-graphic bytes."""
    return "".join(
        chr(c) if _graphic(c) else "." for c in (x & _MASK32).to_bytes(4, "big")
    )


class _Params:
    def __init__(self, rep: Sequence[int]) -> None:
        self.rep = rep
        self.n_accept = MAX_MATCH_LEN
        self.check = 32
        self.stop_shorter = False


class BinTree:
    """Binary search tree of words kept in a ring of nodes.

    Nodes are identified by their index in the ring; NULL marks a
    missing node.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise LZMAError("newBinTree: capacity must be larger than zero")
        if capacity >= NULL:
            raise LZMAError("newBinTree: capacity must less 2^{32}-1")
        self.dict = None
        self.values: List[int] = [0] * capacity
        self.parents: List[int] = [NULL] * capacity
        self.lefts: List[int] = [NULL] * capacity
        self.rights: List[int] = [NULL] * capacity
        self.hoff = -WORD_LEN
        self.front = 0
        self.root = NULL
        self._word = 0
        self._data = b""

    def set_dict(self, dictionary) -> None:
        """Attach the encoder dictionary."""
        self.dict = dictionary

    def write_byte(self, c: int) -> None:
        """Add the word ending with byte ``c`` to the tree."""
        self._word = ((self._word << 8) | (c & 0xFF)) & _MASK32
        self.hoff += 1
        if self.hoff < 0:
            return
        v = self.front
        if v < self.hoff:
            # the oldest node is overwritten
            self._remove(v)
        self.values[v] = self._word
        self._add(v)
        self.front += 1
        if self.front >= len(self.values):
            self.front = 0

    def write(self, data: bytes) -> int:
        """Add all words ending in ``data``."""
        for c in data:
            self.write_byte(c)
        return len(data)

    def _add(self, v: int) -> None:
        self.lefts[v] = NULL
        self.rights[v] = NULL
        if self.root == NULL:
            self.root = v
            self.parents[v] = NULL
            return
        x = self.values[v]
        p = self.root
        while True:
            if x <= self.values[p]:
                if self.lefts[p] == NULL:
                    self.lefts[p] = v
                    self.parents[v] = p
                    return
                p = self.lefts[p]
            else:
                if self.rights[p] == NULL:
                    self.rights[p] = v
                    self.parents[v] = p
                    return
                p = self.rights[p]

    def _remove(self, v: int) -> None:
        par = NULL if self.root == v else self.parents[v]
        is_left = par != NULL and self.lefts[par] == v

        def relink(new: int) -> None:
            if par == NULL:
                self.root = new
            elif is_left:
                self.lefts[par] = new
            else:
                self.rights[par] = new

        left, right = self.lefts[v], self.rights[v]
        if left == NULL:
            relink(right)
            if right != NULL:
                self.parents[right] = par
            return
        if right == NULL:
            relink(left)
            self.parents[left] = par
            return

        if self.rights[left] == NULL:
            # the in-order predecessor is the left child
            self.rights[left] = right
            self.parents[right] = left
            self.parents[left] = par
            relink(left)
            return
        u = self.rights[left]
        while self.rights[u] != NULL:
            u = self.rights[u]
        ul = self.lefts[u]
        up = self.parents[u]
        self.rights[up] = ul
        if ul != NULL:
            self.parents[ul] = up
        self.lefts[u], self.rights[u] = left, right
        self.parents[left] = u
        self.parents[right] = u
        relink(u)
        self.parents[u] = par

    def search(self, v: int, x: int) -> Tuple[int, int]:
        """Find the node with value ``x`` or the two nodes bracing it.

        Returns (node, node) on a hit; the highest such node is returned
        and equal values live in its left subtree.
        """
        a, b = NULL, NULL
        if v == NULL:
            return a, b
        while True:
            value = self.values[v]
            if x <= value:
                if x == value:
                    return v, v
                b = v
                if self.lefts[v] == NULL:
                    return a, b
                v = self.lefts[v]
            else:
                a = v
                if self.rights[v] == NULL:
                    return a, b
                v = self.rights[v]

    def maximum(self, v: int) -> int:
        """Return the node with the largest value in the subtree at ``v``."""
        if v == NULL:
            return NULL
        while self.rights[v] != NULL:
            v = self.rights[v]
        return v

    def minimum(self, v: int) -> int:
        """Return the node with the smallest value in the subtree at ``v``."""
        if v == NULL:
            return NULL
        while self.lefts[v] != NULL:
            v = self.lefts[v]
        return v

    def predecessor(self, v: int) -> int:
        """Return the in-order predecessor of ``v``."""
        if v == NULL:
            return NULL
        u = self.maximum(self.lefts[v])
        if u != NULL:
            return u
        while True:
            p = self.parents[v]
            if p == NULL:
                return NULL
            if self.rights[p] == v:
                return p
            v = p

    def successor(self, v: int) -> int:
        """Return the in-order successor of ``v``."""
        if v == NULL:
            return NULL
        u = self.minimum(self.rights[v])
        if u != NULL:
            return u
        while True:
            p = self.parents[v]
            if p == NULL:
                return NULL
            if self.lefts[p] == v:
                return p
            v = p

    def _distance(self, v: int) -> int:
        dist = self.front - v
        if dist <= 0:
            dist += len(self.values)
        return dist

    def _match(
        self, best: Tuple[int, int], dists: Iterator[int], params: _Params
    ) -> Tuple[Tuple[int, int], int, bool]:
        buf = self.dict.buf
        size = len(buf.data)
        data = self._data
        checked = 0
        while True:
            if checked >= params.check:
                return best, checked, True
            dist = next(dists, None)
            if dist is None:
                return best, checked, False
            checked += 1
            best_dist, best_n = best
            if best_n > 0:
                i = (buf.rear - dist + best_n - 1) % size
                if buf.data[i] != data[best_n - 1]:
                    if params.stop_shorter:
                        return best, checked, False
                    continue
            n = buf.match_len(dist, data)
            if n == 0:
                if params.stop_shorter:
                    return best, checked, False
                continue
            if n == 1 and dist - MIN_DISTANCE != params.rep[0]:
                continue
            if n < best_n or (n == best_n and dist >= best_dist):
                continue
            best = (dist, n)
            if n >= params.n_accept:
                return best, checked, True

    def _walk(self, start: int, step: Callable[[int], int]) -> Iterator[int]:
        node = start
        while node != NULL:
            yield self._distance(node)
            node = step(node)

    def _same_values(self, start: int, x: int) -> Iterator[int]:
        node = start
        while node != NULL:
            yield self._distance(node)
            a, b = self.search(self.lefts[node], x)
            node = a if a == b else NULL

    def next_op(self, rep: Sequence[int]) -> Union[Lit, Match]:
        """Find the next operation for the data at the dictionary head."""
        data = self.dict.buf.peek(MAX_MATCH_LEN)
        if not data:
            raise LZMAError("no data in buffer")
        self._data = data

        best = (0, 0)
        params = _Params(rep)
        best, checked, accepted = self._match(best, iter((3, 2, 1)), params)
        if not accepted:
            params.check -= checked
            x = xval(data)
            u, v = self.search(self.root, x)
            if u == v and len(data) == 4:
                best, _, _ = self._match(best, self._same_values(u, x), params)
            else:
                params.stop_shorter = True
                best, checked, accepted = self._match(
                    best, self._walk(v, self.successor), params
                )
                if not accepted:
                    params.check -= checked
                    best, _, _ = self._match(
                        best, self._walk(u, self.predecessor), params
                    )

        dist, n = best
        if n == 0:
            return Lit(data[0])
        return Match(distance=dist, n=n)