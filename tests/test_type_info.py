import struct

import pytest

from tdswire.collation import Collation
from tdswire.reader import ByteReader, ProtocolError
from tdswire.type_info import (
    XML_SIZE,
    FixedLen,
    FixedLenType,
    VarLenSized,
    VarLenSizedPrecision,
    VarLenType,
    XmlSchema,
    XmlType,
    decode_type_info,
)


def _b_varchar(text):
    return bytes([len(text)]) + text.encode("utf-16-le")


def _us_varchar(text):
    return struct.pack("<H", len(text)) + text.encode("utf-16-le")


def test_fixed_length_type():
    reader = ByteReader(bytes([FixedLenType.Int4]))
    assert decode_type_info(reader) == FixedLen(FixedLenType.Int4)
    assert reader.is_eof()


def test_intn_reads_one_byte_length():
    reader = ByteReader(bytes([VarLenType.Intn, 4]))
    assert decode_type_info(reader) == VarLenSized(VarLenType.Intn, 4, None)
    assert reader.is_eof()


def test_nvarchar_reads_collation():
    data = bytes([VarLenType.NVarchar]) + struct.pack("<HIB", 8000, 0x0409, 52)
    reader = ByteReader(data)
    info = decode_type_info(reader)
    assert info == VarLenSized(VarLenType.NVarchar, 8000, Collation(0x0409, 52))
    assert reader.is_eof()


def test_text_has_no_collation():
    data = bytes([VarLenType.Text]) + struct.pack("<I", 2147483647)
    info = decode_type_info(ByteReader(data))
    assert info == VarLenSized(VarLenType.Text, 2147483647, None)


def test_numeric_reads_precision_and_scale():
    reader = ByteReader(bytes([VarLenType.Numericn, 17, 38, 2]))
    info = decode_type_info(reader)
    assert info == VarLenSizedPrecision(VarLenType.Numericn, 17, 38, 2)
    assert reader.is_eof()


def test_date_has_implicit_length():
    reader = ByteReader(bytes([VarLenType.Daten]))
    info = decode_type_info(reader)
    assert info == VarLenSized(VarLenType.Daten, 3, None)
    assert reader.is_eof()


def test_xml_without_schema():
    info = decode_type_info(ByteReader(bytes([VarLenType.Xml, 0])))
    assert info == XmlType(None, XML_SIZE)


def test_xml_with_schema():
    data = (
        bytes([VarLenType.Xml, 1])
        + _b_varchar("db")
        + _b_varchar("dbo")
        + _us_varchar("coll")
    )
    reader = ByteReader(data)
    info = decode_type_info(reader)
    assert info == XmlType(XmlSchema("db", "dbo", "coll"), XML_SIZE)
    assert reader.is_eof()


def test_unknown_type_is_rejected():
    with pytest.raises(ProtocolError):
        decode_type_info(ByteReader(bytes([0x01])))


def test_udt_is_unsupported():
    with pytest.raises(ProtocolError):
        decode_type_info(ByteReader(bytes([VarLenType.Udt, 0, 0])))


def test_truncated_data_raises():
    with pytest.raises(ProtocolError):
        decode_type_info(ByteReader(bytes([VarLenType.NVarchar, 0x40])))