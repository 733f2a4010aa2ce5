"""Pure Python readers and writers for classic LZMA and LZMA2 data."""

__version__ = "0.1.0"