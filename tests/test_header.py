import pytest

from xzkit.errors import LZMAError
from xzkit.header import HEADER_LEN, Header, valid_header
from xzkit.properties import Properties

SAMPLES = [
    Header(properties=Properties(3, 0, 2), dict_cap=8 * 1024 * 1024, size=-1),
    Header(properties=Properties(4, 3, 3), dict_cap=4096, size=10),
]


@pytest.mark.parametrize("h", SAMPLES)
def test_header_marshalling(h):
    data = h.to_bytes()
    assert len(data) == HEADER_LEN
    assert Header.from_bytes(data) == h


@pytest.mark.parametrize("h", SAMPLES)
def test_valid_header(h):
    assert valid_header(h.to_bytes())


def test_invalid_header_text():
    assert not valid_header(b"1234567890123")


def test_header_wire_bytes():
    data = SAMPLES[0].to_bytes()
    assert data == bytes([0x5D, 0x00, 0x00, 0x80, 0x00]) + b"\xff" * 8


def test_zero_size_is_written_as_unknown():
    h = Header(properties=Properties(3, 0, 2), dict_cap=4096, size=0)
    assert Header.from_bytes(h.to_bytes()).size == -1


def test_wrong_length():
    with pytest.raises(LZMAError):
        Header.from_bytes(b"\x5d" * 12)


def test_bad_properties_code():
    data = bytes([225]) + SAMPLES[0].to_bytes()[1:]
    with pytest.raises(LZMAError):
        Header.from_bytes(data)
    assert not valid_header(data)


def test_size_out_of_range():
    data = SAMPLES[0].to_bytes()[:5] + b"\x00" * 7 + b"\x80"
    with pytest.raises(LZMAError):
        Header.from_bytes(data)


def test_invalid_properties_on_encode():
    h = Header(properties=Properties(9, 0, 0), dict_cap=4096)
    with pytest.raises(LZMAError):
        h.to_bytes()


def test_odd_dict_cap_not_valid():
    h = Header(properties=Properties(3, 0, 2), dict_cap=5000, size=-1)
    assert not valid_header(h.to_bytes())


def test_too_large_size_not_valid():
    h = Header(properties=Properties(3, 0, 2), dict_cap=4096, size=(1 << 38) + 1)
    assert not valid_header(h.to_bytes())