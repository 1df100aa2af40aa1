import struct

import pytest

from tdswire.collation import Collation
from tdswire.column_data import ColumnData, ColumnKind
from tdswire.reader import ByteReader, ProtocolError
from tdswire.token_col_metadata import (
    BaseMetaDataColumn,
    ColumnFlag,
    TokenColMetaData,
)
from tdswire.type_info import (
    FixedLen,
    FixedLenType,
    VarLenSized,
    VarLenSizedPrecision,
    VarLenType,
    XmlType,
)


def b_varchar(text):
    return bytes((len(text),)) + text.encode("utf-16-le")


def us_varchar(text):
    return struct.pack("<H", len(text)) + text.encode("utf-16-le")


def base_prefix(flags):
    return struct.pack("<IH", 0, flags)


def test_fixed_int_column():
    data = base_prefix(ColumnFlag.Nullable) + bytes((FixedLenType.Int4,))
    reader = ByteReader(data)
    base = BaseMetaDataColumn.decode(reader)
    assert base.flags == ColumnFlag.Nullable
    assert base.ty == FixedLen(FixedLenType.Int4)
    assert base.null_value() == ColumnData(ColumnKind.I32, None)
    assert reader.is_eof()


def test_invalid_flags():
    data = base_prefix(0x0004) + bytes((FixedLenType.Int4,))
    with pytest.raises(ProtocolError):
        BaseMetaDataColumn.decode(ByteReader(data))


def test_nvarchar_column_with_collation():
    data = (
        base_prefix(ColumnFlag.Nullable | ColumnFlag.Updateable)
        + bytes((VarLenType.NVarchar,))
        + struct.pack("<H", 100)
        + struct.pack("<IB", 0x0409, 0)
    )
    base = BaseMetaDataColumn.decode(ByteReader(data))
    assert base.ty == VarLenSized(VarLenType.NVarchar, 100, Collation(0x0409, 0))
    assert ColumnFlag.Updateable in base.flags
    assert base.null_value().kind == ColumnKind.STRING


def test_ntext_column_skips_table_name():
    data = (
        base_prefix(0)
        + bytes((VarLenType.NText,))
        + struct.pack("<I", 0x7FFFFFFE)
        + struct.pack("<IB", 0x0409, 0)
        + bytes((1,))
        + us_varchar("tbl")
    )
    reader = ByteReader(data)
    base = BaseMetaDataColumn.decode(reader)
    assert base.ty.ty == VarLenType.NText
    assert reader.is_eof()


def test_text_column_skips_extra_fields_and_table_name():
    data = (
        base_prefix(0)
        + bytes((VarLenType.Text,))
        + struct.pack("<I", 0x7FFFFFFF)
        + struct.pack("<HHB", 0x0409, 0, 0)
        + bytes((2,))
        + us_varchar("dbo")
        + us_varchar("notes")
    )
    reader = ByteReader(data)
    base = BaseMetaDataColumn.decode(reader)
    assert base.ty.ty == VarLenType.Text
    assert base.null_value().kind == ColumnKind.STRING
    assert reader.is_eof()


def test_token_with_two_columns():
    data = (
        struct.pack("<H", 2)
        + base_prefix(0) + bytes((FixedLenType.Int8,)) + b_varchar("id")
        + base_prefix(ColumnFlag.Nullable) + bytes((FixedLenType.Bit,)) + b_varchar("flag")
    )
    reader = ByteReader(data)
    token = TokenColMetaData.decode(reader)
    assert [c.col_name for c in token.columns] == ["id", "flag"]
    assert token.columns[0].base.ty == FixedLen(FixedLenType.Int8)
    assert token.columns[1].base.null_value() == ColumnData(ColumnKind.BIT)
    assert reader.is_eof()


def test_token_without_columns_marker():
    reader = ByteReader(struct.pack("<H", 0xFFFF))
    assert TokenColMetaData.decode(reader).columns == ()
    assert reader.is_eof()


@pytest.mark.parametrize(
    "fixed, kind",
    [
        (FixedLenType.Null, ColumnKind.I32),
        (FixedLenType.Money4, ColumnKind.F32),
        (FixedLenType.Datetime4, ColumnKind.SMALL_DATETIME),
        (FixedLenType.Money, ColumnKind.F64),
    ],
)
def test_fixed_null_values(fixed, kind):
    assert BaseMetaDataColumn(ColumnFlag(0), FixedLen(fixed)).null_value().kind == kind


def test_precision_type_null_value():
    ty = VarLenSizedPrecision(VarLenType.Numericn, 17, 38, 2)
    assert BaseMetaDataColumn(ColumnFlag(0), ty).null_value() == ColumnData(ColumnKind.NUMERIC)


def test_xml_null_value():
    base = BaseMetaDataColumn(ColumnFlag(0), XmlType(None))
    assert base.null_value() == ColumnData(ColumnKind.XML)


def test_udt_null_value_is_unsupported():
    base = BaseMetaDataColumn(ColumnFlag(0), VarLenSized(VarLenType.Udt, 0))
    with pytest.raises(ProtocolError):
        base.null_value()