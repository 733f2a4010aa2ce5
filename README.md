# xzkit

xzkit compresses and decompresses LZMA data in pure Python, with no C extension. It handles two formats:

- the classic `.lzma` format, with `xzkit.reader.Reader` and `xzkit.writer.Writer`;
- raw LZMA2 chunk sequences, the kind stored inside xz blocks, with `xzkit.reader2.Reader2` and `xzkit.writer2.Writer2`.

It also provides two pieces used when building xz blocks: the LZMA2 filter entry of a block header (`xzkit.lzmafilter.LzmaFilter`) and the hash for blocks that carry no checksum (`xzkit.nonecheck.NoneHash`).

## Installation

```
pip install xzkit
```

To install the test tools as well:

```
pip install "xzkit[test]"
```

## Classic LZMA

```python
import io
from xzkit.writer import Writer, WriterConfig
from xzkit.reader import Reader

sink = io.BytesIO()
with Writer(sink, WriterConfig()) as w:
    w.write(b"The quick brown fox jumps over the lazy dog.")

reader = Reader(io.BytesIO(sink.getvalue()), None)
print(reader.read())
```

`Writer` writes the 13-byte header as soon as it is created. Its output is buffered, and `close()` (or leaving the `with` block without an exception) finishes the stream and flushes it. The underlying stream is not closed.

`WriterConfig` fields. A zero or `None` value means "use the default":

- `properties`: a `Properties(lc, lp, pb)`. The default is lc 3, lp 0, pb 2.
- `dict_cap`: dictionary capacity. The default is 8 MiB, and the value must be between 4096 and 2^32-1.
- `buf_size`: size of the lookahead buffer. The default is 4096, and the value must be at least 273.
- `matcher`: `MatchAlgorithm.HASH_TABLE4` (the default) or `MatchAlgorithm.BINARY_TREE`.
- `size_in_header` and `size`: store an explicit uncompressed size in the header. A positive `size` turns this on by itself.
- `eos_marker`: write an end-of-stream marker. If the header carries no size, the marker is always written.

When the header carries a size, writing more than that size takes only the part that fits and raises `NoSpaceError`, whose `written` attribute holds the number of bytes taken. Closing before that size is reached raises `LZMAError`, and the writer stays usable.

`Reader(stream, config)` reads and checks the header when it is created. `ReaderConfig(dict_cap=...)` sets a minimum dictionary capacity. `read(size=-1)` returns decompressed bytes and returns an empty result at the end. `eos_marker()` tells whether an end-of-stream marker was met. `xzkit.header.valid_header(data)` tests whether 13 bytes look like a plausible LZMA header.

## LZMA2

```python
import io
from xzkit.writer2 import Writer2, Writer2Config
from xzkit.reader2 import Reader2, Reader2Config

sink = io.BytesIO()
w = Writer2(sink, Writer2Config(dict_cap=4096))
w.write(b"a")
w.close()
assert sink.getvalue() == bytes([1, 0, 0, ord("a"), 0])

r = Reader2(io.BytesIO(sink.getvalue()), Reader2Config(dict_cap=4096))
assert r.read(1) == b"a"
```

`Writer2Config` has the same `properties`, `dict_cap`, `buf_size` and `matcher` fields as `WriterConfig`. It also requires lc + lp to be at most 4.

`Writer2.write` buffers data. Each chunk is written either compressed or uncompressed, whichever is shorter. `flush()` writes every chunk still pending, and output that has only been flushed may be followed by another writer's output. `close()` flushes and then adds the end-of-stream chunk. After that, further calls raise `LZMAError`.

`Reader2.read(size=-1)` returns decompressed data and returns an empty result at the end. `eos()` tells whether an end-of-stream chunk has been read. A sequence without an end-of-stream chunk is accepted. A sequence that breaks off inside a chunk raises `EOFError`.

`xzkit.chunks` has the chunk header codec (`ChunkHeader`, `read_chunk_header`), the chunk state machine (`ChunkState`) and the dictionary-capacity codes (`encode_dict_cap`, `decode_dict_cap`).

## xz building blocks

- `LzmaFilter(dict_cap)` encodes and decodes the 3-byte LZMA2 filter entry, using `to_bytes` and `from_bytes`. `reader(stream, dict_cap)` gives a `Reader2`, and `writer(stream, config)` gives a `Writer2`; both use at least the filter's dictionary capacity.
- `NoneHash` is a hash whose digest size is zero. `sum(prefix)` returns `prefix` unchanged.

## Lower-level pieces

The codec is made of modules that can be used on their own:

- the range coder: `xzkit.rangecoder`;
- the bit-tree codecs: `xzkit.treecodecs`;
- the length, literal and distance codecs: `xzkit.codecs`;
- the coder state: `xzkit.state`;
- the dictionaries: `xzkit.decoderdict` and `xzkit.encoderdict`;
- the matchers: `xzkit.hashtable` and `xzkit.bintree`;
- the raw stream `Decoder` and `Encoder`: `xzkit.decoder` and `xzkit.encoder`.

## What this package does not do

- It does not read or write complete `.xz` files. The stream header and footer, block headers, the index and the CRC32, CRC64 and SHA-256 checks are not included. Only the LZMA2 filter entry and the "none" check are provided.
- It has no command-line tool.

## Errors

Format and configuration problems raise `xzkit.errors.LZMAError` or one of its subclasses. `LimitError` means a `LimitedByteWriter` is full. `NoSpaceError` means a buffer or a size limit could take only part of the data. Compressed data that ends too early raises `EOFError`.