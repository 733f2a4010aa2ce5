import io
import random

import pytest

from xzkit.errors import LZMAError
from xzkit.properties import Properties
from xzkit.reader2 import Reader2, Reader2Config
from xzkit.writer2 import Writer2, Writer2Config

_WORDS = [
    "the", "quick", "brown", "fox", "jumps", "over", "lazy", "dog",
    "lorem", "ipsum", "dolor", "sit", "amet", "chunk", "stream", "data",
]


def _text(seed, length):
    rng = random.Random(seed)
    parts = []
    size = 0
    while size < length:
        w = rng.choice(_WORDS) + rng.choice([" ", " ", ", ", ".\n"])
        parts.append(w)
        size += len(w)
    return "".join(parts)[:length].encode()


def _decompress(data):
    r = Reader2(io.BytesIO(data), Reader2Config(dict_cap=4096))
    return r.read()


def test_writer2_single_byte_chunk_bytes():
    buf = io.BytesIO()
    w = Writer2(buf, Writer2Config(dict_cap=4096))
    assert w.write(b"a") == 1
    w.flush()
    # a second flush must not write another chunk
    w.flush()
    w.close()
    assert buf.getvalue() == bytes([1, 0, 0, ord("a"), 0])


def test_cycle1():
    buf = io.BytesIO()
    w = Writer2(buf, Writer2Config(dict_cap=4096))
    assert w.write(b"a") == 1
    w.close()
    r = Reader2(io.BytesIO(buf.getvalue()), Reader2Config(dict_cap=4096))
    assert r.read(3) == b"a"


def test_cycle2_text_round_trip():
    txt = _text(42, 8000)
    buf = io.BytesIO()
    w = Writer2(buf, Writer2Config(dict_cap=4096))
    assert w.write(txt) == len(txt)
    w.close()
    out = buf.getvalue()
    assert len(out) < len(txt)
    assert _decompress(out) == txt


def test_several_chunks_with_incompressible_data():
    txt = _text(7, 3000)
    noise = random.Random(1).randbytes(2000)
    buf = io.BytesIO()
    w = Writer2(buf, Writer2Config(dict_cap=4096))
    w.write(txt)
    w.flush()
    w.write(noise)
    w.flush()
    w.write(txt)
    w.close()
    assert _decompress(buf.getvalue()) == txt + noise + txt


def test_reader_reports_eos_after_close():
    buf = io.BytesIO()
    with Writer2(buf, Writer2Config(dict_cap=4096)) as w:
        w.write(b"hello hello hello")
    r = Reader2(io.BytesIO(buf.getvalue()), Reader2Config(dict_cap=4096))
    assert r.read() == b"hello hello hello"
    assert r.eos() is True


def test_empty_stream_is_single_eos_byte():
    buf = io.BytesIO()
    w = Writer2(buf, Writer2Config(dict_cap=4096))
    w.close()
    assert buf.getvalue() == b"\x00"


def test_write_after_close_raises():
    w = Writer2(io.BytesIO(), Writer2Config(dict_cap=4096))
    w.close()
    with pytest.raises(LZMAError):
        w.write(b"x")
    with pytest.raises(LZMAError):
        w.flush()
    with pytest.raises(LZMAError):
        w.close()


def test_config_defaults_filled():
    c = Writer2Config()
    c.verify()
    assert c.dict_cap == 8 * 1024 * 1024
    assert c.buf_size == 4096
    assert (c.properties.lc, c.properties.lp, c.properties.pb) == (3, 0, 2)


@pytest.mark.parametrize(
    "config",
    [
        Writer2Config(properties=Properties(lc=4, lp=1, pb=2)),
        Writer2Config(buf_size=10),
        Writer2Config(dict_cap=100),
        Writer2Config(matcher=7),
    ],
)
def test_config_errors(config):
    with pytest.raises(LZMAError):
        config.verify()