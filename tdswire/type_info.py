"""Column type descriptions as sent in column metadata."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from tdswire.collation import Collation
from tdswire.reader import ByteReader, ProtocolError

XML_SIZE = 0xFFFFFFFFFFFFFFFE


class FixedLenType(IntEnum):
    """Types whose length follows from the type byte alone."""

    Null = 0x1F
    Int1 = 0x30
    Bit = 0x32
    Int2 = 0x34
    Int4 = 0x38
    Datetime4 = 0x3A
    Float4 = 0x3B
    Money = 0x3C
    Datetime = 0x3D
    Float8 = 0x3E
    Money4 = 0x7A
    Int8 = 0x7F


class VarLenType(IntEnum):
    """Types that carry a length after the type byte."""

    Guid = 0x24
    Intn = 0x26
    Bitn = 0x68
    Decimaln = 0x6A
    Numericn = 0x6C
    Floatn = 0x6D
    Money = 0x6E
    Datetimen = 0x6F
    Daten = 0x28
    Timen = 0x29
    Datetime2 = 0x2A
    DatetimeOffsetn = 0x2B
    BigVarBin = 0xA5
    BigVarChar = 0xA7
    BigBinary = 0xAD
    BigChar = 0xAF
    NVarchar = 0xE7
    NChar = 0xEF
    Xml = 0xF1
    Udt = 0xF0
    Text = 0x23
    Image = 0x22
    NText = 0x63
    SSVariant = 0x62


_BYTE_LENGTH = frozenset({
    VarLenType.Timen,
    VarLenType.DatetimeOffsetn,
    VarLenType.Datetime2,
    VarLenType.Bitn,
    VarLenType.Intn,
    VarLenType.Floatn,
    VarLenType.Decimaln,
    VarLenType.Numericn,
    VarLenType.Guid,
    VarLenType.Money,
    VarLenType.Datetimen,
})

_SHORT_LENGTH = frozenset({
    VarLenType.NChar,
    VarLenType.BigChar,
    VarLenType.NVarchar,
    VarLenType.BigVarChar,
    VarLenType.BigBinary,
    VarLenType.BigVarBin,
})

_LONG_LENGTH = frozenset({VarLenType.Image, VarLenType.Text, VarLenType.NText})

_WITH_COLLATION = frozenset({
    VarLenType.NText,
    VarLenType.BigChar,
    VarLenType.NChar,
    VarLenType.NVarchar,
    VarLenType.BigVarChar,
})


@dataclass(frozen=True)
class XmlSchema:
    """The schema collection an XML column is bound to."""

    db_name: str
    owner: str
    collection: str


@dataclass(frozen=True)
class FixedLen:
    """A fixed-length type."""

    ty: FixedLenType


@dataclass(frozen=True)
class VarLenSized:
    """A variable-length type with its maximum size and optional collation."""

    ty: VarLenType
    size: int
    collation: Collation | None = None


@dataclass(frozen=True)
class VarLenSizedPrecision:
    """A decimal or numeric type with size, precision and scale."""

    ty: VarLenType
    size: int
    precision: int
    scale: int


@dataclass(frozen=True)
class XmlType:
    """An XML type, optionally bound to a schema."""

    schema: XmlSchema | None
    size: int = XML_SIZE


TypeInfo = Union[FixedLen, VarLenSized, VarLenSizedPrecision, XmlType]


def _read_length(reader: ByteReader, ty: VarLenType) -> int:
    if ty == VarLenType.Daten:
        return 3
    if ty in _BYTE_LENGTH:
        return reader.read_u8()
    if ty in _SHORT_LENGTH:
        return reader.read_u16_le()
    if ty in _LONG_LENGTH:
        return reader.read_u32_le()
    raise ProtocolError(f"unsupported column type: {ty.name}")


def decode_type_info(reader: ByteReader) -> TypeInfo:
    """Read a type description from the reader."""
    raw = reader.read_u8()

    try:
        return FixedLen(FixedLenType(raw))
    except ValueError:
        pass

    try:
        ty = VarLenType(raw)
    except ValueError:
        raise ProtocolError(f"invalid or unsupported column type: {raw}") from None

    if ty == VarLenType.Xml:
        schema = None
        if reader.read_u8() == 1:
            db_name = reader.read_b_varchar()
            owner = reader.read_b_varchar()
            collection = reader.read_us_varchar()
            schema = XmlSchema(db_name, owner, collection)
        return XmlType(schema)

    size = _read_length(reader, ty)

    collation = None
    if ty in _WITH_COLLATION:
        info = reader.read_u32_le()
        sort_id = reader.read_u8()
        collation = Collation(info, sort_id)

    if ty in (VarLenType.Decimaln, VarLenType.Numericn):
        precision = reader.read_u8()
        scale = reader.read_u8()
        return VarLenSizedPrecision(ty, size, precision, scale)

    return VarLenSized(ty, size, collation)