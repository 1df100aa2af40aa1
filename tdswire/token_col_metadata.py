"""The COLMETADATA token describing the columns of a result set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

from tdswire.column_data import ColumnData, ColumnKind
from tdswire.reader import ByteReader, ProtocolError
from tdswire.type_info import (
    FixedLen,
    FixedLenType,
    TypeInfo,
    VarLenSized,
    VarLenSizedPrecision,
    VarLenType,
    XmlType,
    decode_type_info,
)


class ColumnFlag(IntFlag):
    """Properties of a result column."""

    Nullable = 1 << 0
    CaseSensitive = 1 << 1
    Updateable = 1 << 3
    UpdateableUnknown = 1 << 4
    Identity = 1 << 5
    Computed = 1 << 7
    FixedLenClrType = 1 << 10
    SparseColumnSet = 1 << 11
    Encrypted = 1 << 12
    Hidden = 1 << 13
    Key = 1 << 14
    NullableUnknown = 1 << 15


_KNOWN_FLAGS = sum(flag.value for flag in ColumnFlag)

_FIXED_NULL_KIND = {
    FixedLenType.Null: ColumnKind.I32,
    FixedLenType.Int1: ColumnKind.U8,
    FixedLenType.Bit: ColumnKind.BIT,
    FixedLenType.Int2: ColumnKind.I16,
    FixedLenType.Int4: ColumnKind.I32,
    FixedLenType.Datetime4: ColumnKind.SMALL_DATETIME,
    FixedLenType.Float4: ColumnKind.F32,
    FixedLenType.Money: ColumnKind.F64,
    FixedLenType.Datetime: ColumnKind.DATETIME,
    FixedLenType.Float8: ColumnKind.F64,
    FixedLenType.Money4: ColumnKind.F32,
    FixedLenType.Int8: ColumnKind.I64,
}

_VAR_NULL_KIND = {
    VarLenType.Guid: ColumnKind.GUID,
    VarLenType.Intn: ColumnKind.I32,
    VarLenType.Bitn: ColumnKind.BIT,
    VarLenType.Decimaln: ColumnKind.NUMERIC,
    VarLenType.Numericn: ColumnKind.NUMERIC,
    VarLenType.Floatn: ColumnKind.F32,
    VarLenType.Money: ColumnKind.F64,
    VarLenType.Datetimen: ColumnKind.DATETIME,
    VarLenType.Daten: ColumnKind.DATE,
    VarLenType.Timen: ColumnKind.TIME,
    VarLenType.Datetime2: ColumnKind.DATETIME2,
    VarLenType.DatetimeOffsetn: ColumnKind.DATETIME_OFFSET,
    VarLenType.BigVarBin: ColumnKind.BINARY,
    VarLenType.BigVarChar: ColumnKind.STRING,
    VarLenType.BigBinary: ColumnKind.BINARY,
    VarLenType.BigChar: ColumnKind.STRING,
    VarLenType.NVarchar: ColumnKind.STRING,
    VarLenType.NChar: ColumnKind.STRING,
    VarLenType.Xml: ColumnKind.XML,
    VarLenType.Text: ColumnKind.STRING,
    VarLenType.Image: ColumnKind.BINARY,
    VarLenType.NText: ColumnKind.STRING,
}


def _skip_table_name(reader: ByteReader) -> None:
    for _ in range(reader.read_u8()):
        reader.read_us_varchar()


@dataclass(frozen=True)
class BaseMetaDataColumn:
    """The flags and type of a column."""

    flags: ColumnFlag
    ty: TypeInfo

    def null_value(self) -> ColumnData:
        """The NULL value a column of this type produces."""
        ty = self.ty
        if isinstance(ty, FixedLen):
            return ColumnData(_FIXED_NULL_KIND[ty.ty])
        if isinstance(ty, XmlType):
            return ColumnData(ColumnKind.XML)
        if isinstance(ty, (VarLenSized, VarLenSizedPrecision)):
            kind = _VAR_NULL_KIND.get(ty.ty)
            if kind is None:
                raise ProtocolError(f"column type {ty.ty.name} is not supported")
            return ColumnData(kind)
        raise TypeError(f"unknown type info: {ty!r}")

    @classmethod
    def decode(cls, reader: ByteReader) -> BaseMetaDataColumn:
        reader.read_u32_le()  # user type
        raw_flags = reader.read_u16_le()
        if raw_flags & ~_KNOWN_FLAGS:
            raise ProtocolError("column metadata: invalid flags")
        flags = ColumnFlag(raw_flags)

        ty = decode_type_info(reader)
        if isinstance(ty, VarLenSized):
            if ty.ty == VarLenType.Text:
                reader.read_u16_le()
                reader.read_u16_le()
                reader.read_u8()
                _skip_table_name(reader)
            elif ty.ty in (VarLenType.NText, VarLenType.Image):
                _skip_table_name(reader)

        return cls(flags, ty)


@dataclass(frozen=True)
class MetaDataColumn:
    """A column description with its name."""

    base: BaseMetaDataColumn
    col_name: str


@dataclass(frozen=True)
class TokenColMetaData:
    """The columns of a result set."""

    columns: tuple[MetaDataColumn, ...]

    @classmethod
    def decode(cls, reader: ByteReader) -> TokenColMetaData:
        count = reader.read_u16_le()
        columns = []
        if 0 < count < 0xFFFF:
            for _ in range(count):
                base = BaseMetaDataColumn.decode(reader)
                name = reader.read_b_varchar()
                columns.append(MetaDataColumn(base, name))
        return cls(tuple(columns))