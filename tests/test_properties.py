import pytest

from xzkit.errors import LZMAError
from xzkit.properties import MAX_PROPERTY_CODE, Lit, Match, Properties


def test_code_round_trip_all_codes():
    for code in range(MAX_PROPERTY_CODE + 1):
        p = Properties.from_code(code)
        p.verify()
        assert p.code() == code


def test_properties_round_trip():
    p = Properties(lc=4, lp=3, pb=3)
    assert Properties.from_code(p.code()) == p


def test_invalid_code():
    with pytest.raises(LZMAError):
        Properties.from_code(MAX_PROPERTY_CODE + 1)


@pytest.mark.parametrize(
    "props", [Properties(9, 0, 2), Properties(3, 5, 2), Properties(3, 0, 5), Properties(-1, 0, 0)]
)
def test_verify_out_of_range(props):
    with pytest.raises(LZMAError):
        props.verify()


def test_properties_str():
    assert str(Properties(3, 0, 2)) == "LC 3 LP 0 PB 2"


def test_default_properties_zero():
    assert Properties() == Properties.from_code(0)


def test_match():
    m = Match(distance=5, n=3)
    assert len(m) == 3
    assert str(m) == "M{5,3}"


def test_lit():
    lit = Lit(ord("a"))
    assert len(lit) == 1
    assert str(lit) == "L{a/61}"
    assert str(Lit(0)).startswith("L{./")