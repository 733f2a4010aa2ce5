import pytest

from xzkit.bintree import BinTree
from xzkit.encoderdict import EncoderDict
from xzkit.errors import LZMAError
from xzkit.hashtable import HashTable
from xzkit.matchalgorithm import MatchAlgorithm


@pytest.mark.parametrize(
    "alg, name",
    [(MatchAlgorithm.HASH_TABLE4, "HashTable4"), (MatchAlgorithm.BINARY_TREE, "BinaryTree")],
)
def test_str(alg, name):
    assert str(alg) == name


def test_new_hash_table():
    m = MatchAlgorithm.HASH_TABLE4.new(4096)
    assert isinstance(m, HashTable)
    assert m.word_len == 4


def test_new_binary_tree():
    m = MatchAlgorithm.BINARY_TREE.new(4096)
    assert isinstance(m, BinTree)
    assert len(m.values) == 4096


@pytest.mark.parametrize("alg", list(MatchAlgorithm))
def test_value_round_trip(alg):
    assert MatchAlgorithm(int(alg)) is alg


def test_unsupported_value():
    with pytest.raises(ValueError):
        MatchAlgorithm(len(MatchAlgorithm))


def test_hash_table_zero_capacity_rejected():
    with pytest.raises(LZMAError):
        MatchAlgorithm.HASH_TABLE4.new(0)


def test_binary_tree_zero_capacity_rejected():
    with pytest.raises(LZMAError):
        MatchAlgorithm.BINARY_TREE.new(0)


@pytest.mark.parametrize("alg", list(MatchAlgorithm))
def test_matcher_attaches_to_dictionary(alg):
    m = MatchAlgorithm(int(alg)).new(4096)
    d = EncoderDict(4096, 4096, m)
    assert m.dict is d