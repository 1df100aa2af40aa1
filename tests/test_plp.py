import struct

import pytest

from tdswire.column_data import ColumnData, ColumnKind
from tdswire.plp import ReadTyMode, decode_plp, decode_variable_string
from tdswire.reader import ByteReader, EncodingError, ProtocolError
from tdswire.type_info import VarLenType


def test_auto_below_limit_is_fixed():
    mode = ReadTyMode.auto(100)
    assert mode.size == 100
    assert not mode.is_plp


def test_auto_at_limit_is_plp():
    assert ReadTyMode.auto(0xFFFF).is_plp


def test_fixed_value():
    reader = ByteReader(struct.pack("<H", 3) + b"abc")
    assert decode_plp(reader, ReadTyMode(10)) == b"abc"
    assert reader.is_eof()


def test_fixed_empty_value():
    assert decode_plp(ByteReader(struct.pack("<H", 0)), ReadTyMode(10)) == b""


def test_fixed_null():
    assert decode_plp(ByteReader(b"\xff\xff"), ReadTyMode(10)) is None


def test_plp_chunks_with_known_length():
    data = (
        struct.pack("<Q", 5)
        + struct.pack("<I", 3) + b"abc"
        + struct.pack("<I", 2) + b"de"
        + struct.pack("<I", 0)
    )
    reader = ByteReader(data)
    assert decode_plp(reader, ReadTyMode(None)) == b"abcde"
    assert reader.is_eof()


def test_plp_unknown_length():
    data = (
        struct.pack("<Q", 0xFFFFFFFFFFFFFFFE)
        + struct.pack("<I", 4) + b"wxyz"
        + struct.pack("<I", 0)
    )
    assert decode_plp(ByteReader(data), ReadTyMode(None)) == b"wxyz"


def test_plp_null():
    data = struct.pack("<Q", 0xFFFFFFFFFFFFFFFF)
    assert decode_plp(ByteReader(data), ReadTyMode(None)) is None


def test_truncated_fixed_value():
    with pytest.raises(ProtocolError):
        decode_plp(ByteReader(struct.pack("<H", 5) + b"ab"), ReadTyMode(10))


def test_truncated_plp_chunk():
    data = struct.pack("<Q", 5) + struct.pack("<I", 5) + b"ab"
    with pytest.raises(ProtocolError):
        decode_plp(ByteReader(data), ReadTyMode(None))


def test_nvarchar_string():
    raw = "héllo".encode("utf-16-le")
    reader = ByteReader(struct.pack("<H", len(raw)) + raw)
    assert decode_variable_string(reader, VarLenType.NVarchar, 100) == "héllo"


def test_bigchar_is_utf8():
    raw = "zażółć".encode("utf-8")
    reader = ByteReader(struct.pack("<H", len(raw)) + raw)
    assert decode_variable_string(reader, VarLenType.BigChar, 0xFFFF) == "zażółć"


def test_nchar_uses_fixed_framing_even_when_large():
    raw = "abc".encode("utf-16-le")
    reader = ByteReader(struct.pack("<H", len(raw)) + raw)
    assert decode_variable_string(reader, VarLenType.NChar, 0xFFFF) == "abc"


def test_null_string():
    assert decode_variable_string(ByteReader(b"\xff\xff"), VarLenType.NVarchar, 100) is None


def test_odd_length_is_protocol_error():
    reader = ByteReader(struct.pack("<H", 3) + b"abc")
    with pytest.raises(ProtocolError):
        decode_variable_string(reader, VarLenType.NVarchar, 100)


def test_invalid_utf8():
    reader = ByteReader(struct.pack("<H", 2) + b"\xff\xfe")
    with pytest.raises(EncodingError):
        decode_variable_string(reader, VarLenType.BigChar, 100)


def test_invalid_utf16():
    reader = ByteReader(struct.pack("<H", 2) + b"\x00\xd8")
    with pytest.raises(EncodingError):
        decode_variable_string(reader, VarLenType.NVarchar, 100)


def test_round_trip_short_parameter_string():
    text = "grüße 𝄞"
    encoded = ColumnData(ColumnKind.STRING, text).encode()
    # Skip type byte, max length and collation.
    reader = ByteReader(encoded[8:])
    assert decode_variable_string(reader, VarLenType.NVarchar, 8000) == text
    assert reader.is_eof()


def test_round_trip_long_parameter_string():
    text = "x" * 5000 + "ü"
    encoded = ColumnData(ColumnKind.STRING, text).encode()
    reader = ByteReader(encoded[8:])
    assert decode_variable_string(reader, VarLenType.NVarchar, 0xFFFF) == text
    assert reader.is_eof()