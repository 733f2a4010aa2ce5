import random

import pytest

from xzkit.bintree import NULL, BinTree, dump_x, xval
from xzkit.codecs import MAX_MATCH_LEN
from xzkit.encoderdict import EncoderDict
from xzkit.errors import LZMAError, NoSpaceError
from xzkit.properties import Lit, Match

FIND_TEXT = b"Klopp feiert mit Liverpool seinen hoechsten SiegSieg"
PRED_TEXT = b"Klopp feiert mit Liverpool seinen hoechsten Sieg."


def _sample_text(seed, length):
    rnd = random.Random(seed)
    words = [b"lorem", b"ipsum", b"dolor", b"sit", b"amet", b"fox", b"dog", b"lazy"]
    out = bytearray()
    while len(out) < length:
        out += rnd.choice(words) + b" "
    return bytes(out[:length])


def _roundtrip_ops(matcher, data, dict_cap=4096, buf_size=1024):
    d = EncoderDict(dict_cap, buf_size, matcher)
    out = bytearray()
    ops = []

    def step():
        op = matcher.next_op([0, 0, 0, 0])
        ops.append(op)
        if isinstance(op, Lit):
            out.append(op.b)
        else:
            assert 0 < op.distance <= len(out)
            for _ in range(op.n):
                out.append(out[-op.distance])
        d.discard(len(op))

    pos = 0
    while pos < len(data):
        try:
            pos += d.write(data[pos:])
        except NoSpaceError as err:
            pos += err.written
        while d.buffered() > MAX_MATCH_LEN - 1:
            step()
    while d.buffered() > 0:
        step()
    return bytes(out), ops


def _in_order(bt):
    values = []
    v = bt.minimum(bt.root)
    while v != NULL:
        values.append(bt.values[v])
        v = bt.successor(v)
    return values


def test_find_exact_word():
    bt = BinTree(30)
    assert bt.write(FIND_TEXT) == len(FIND_TEXT)
    x = xval(b"Sieg")
    a, b = bt.search(bt.root, x)
    assert a == b
    assert a != NULL
    assert bt.values[a] == x


@pytest.mark.parametrize("word", [b"Sieb", b"Simu"])
def test_find_braces_missing_word(word):
    bt = BinTree(30)
    bt.write(FIND_TEXT)
    x = xval(word)
    a, b = bt.search(bt.root, x)
    assert a != b
    assert a == NULL or bt.values[a] < x
    assert b == NULL or bt.values[b] > x


def test_pred_succ_order():
    bt = BinTree(30)
    assert bt.write(PRED_TEXT) == len(PRED_TEXT)
    forward = _in_order(bt)
    assert forward == sorted(forward)
    backward = []
    v = bt.maximum(bt.root)
    while v != NULL:
        backward.append(bt.values[v])
        v = bt.predecessor(v)
    assert backward == list(reversed(forward))


def test_tree_holds_last_words():
    bt = BinTree(30)
    bt.write(PRED_TEXT)
    n = len(PRED_TEXT)
    expected = sorted(xval(PRED_TEXT[k:k + 4]) for k in range(n - 3 - 30, n - 3))
    assert _in_order(bt) == expected


def test_capacity_limits():
    with pytest.raises(LZMAError):
        BinTree(0)
    with pytest.raises(LZMAError):
        BinTree(NULL)


def test_xval_and_dump():
    assert xval(b"ab") == xval(b"ab\0\0")
    assert xval(b"") == 0
    assert dump_x(xval(b"Sieg")) == "Sieg"
    assert dump_x(xval(b"\x01ab\x7f")) == ".ab."


def test_next_op_small_dictionary():
    data = _sample_text(7, 3000)
    out, _ = _roundtrip_ops(BinTree(300), data, dict_cap=300, buf_size=400)
    assert out == data