"""The ORDER token listing the columns a result is sorted by."""

from __future__ import annotations

from dataclasses import dataclass

from tdswire.reader import ByteReader


@dataclass(frozen=True)
class TokenOrder:
    """Indexes of the columns the result set is ordered by."""

    column_indexes: tuple[int, ...]

    @classmethod
    def decode(cls, reader: ByteReader) -> TokenOrder:
        """Read a byte length followed by two-byte column indexes."""
        count = reader.read_u16_le() // 2
        return cls(tuple(reader.read_u16_le() for _ in range(count)))