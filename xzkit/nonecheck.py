"""Hash used for xz blocks without a checksum."""

from __future__ import annotations


class NoneHash:
    """A hash of size zero that ignores the content of its input."""

    def __init__(self) -> None:
        self.written = 0

    def update(self, data: bytes) -> int:
        """Accept ``data``, counting its length; return that length."""
        self.written += len(data)
        return len(data)

    def sum(self, prefix: bytes = b"") -> bytes:
        """Return ``prefix`` unchanged, since the digest is empty."""
        return bytes(prefix)

    def reset(self) -> None:
        """Clear the count of bytes seen."""
        self.written = 0

    def digest_size(self) -> int:
        """Return 0, the size of the digest."""
        return 0