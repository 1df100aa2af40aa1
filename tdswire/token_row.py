"""The ROW and NBCROW tokens carrying the values of one result row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from tdswire.column_data import ColumnData
from tdswire.column_decode import decode_column
from tdswire.reader import ByteReader
from tdswire.token_col_metadata import TokenColMetaData


@dataclass(frozen=True)
class TokenRow:
    """The values of one row, in column order."""

    data: tuple[ColumnData, ...]

    @classmethod
    def decode(cls, reader: ByteReader, metadata: TokenColMetaData) -> TokenRow:
        """Read a full row, one value per column of the metadata."""
        return cls(tuple(decode_column(reader, col.base.ty) for col in metadata.columns))

    @classmethod
    def decode_nbc(cls, reader: ByteReader, metadata: TokenColMetaData) -> TokenRow:
        """Read a row preceded by a bitmap in which set bits mark NULL columns."""
        columns = metadata.columns
        bitmap = reader.read_exact((len(columns) + 7) // 8)
        values = []
        for i, column in enumerate(columns):
            if bitmap[i // 8] & (1 << (i % 8)):
                values.append(column.base.null_value())
            else:
                values.append(decode_column(reader, column.base.ty))
        return cls(tuple(values))

    def get(self, index: int) -> ColumnData | None:
        """The value at ``index``, or None when out of range."""
        if 0 <= index < len(self.data):
            return self.data[index]
        return None

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[ColumnData]:
        return iter(self.data)