"""Selection of the algorithm that finds matches in the dictionary."""

from __future__ import annotations

import enum
from typing import Union

from .bintree import BinTree
from .hashtable import HashTable


class MatchAlgorithm(enum.IntEnum):
    """Supported matchers: a 4-byte hash table or a binary tree."""

    HASH_TABLE4 = 0
    BINARY_TREE = 1

    def __str__(self) -> str:
        return "HashTable4" if self is MatchAlgorithm.HASH_TABLE4 else "BinaryTree"

    def new(self, dict_cap: int) -> Union[HashTable, BinTree]:
        """Create a matcher for a dictionary of capacity ``dict_cap``."""
        if self is MatchAlgorithm.HASH_TABLE4:
            return HashTable(dict_cap, 4)
        return BinTree(dict_cap)