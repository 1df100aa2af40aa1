"""Decoding column values from row data according to their type description."""

from __future__ import annotations

import uuid
from typing import Callable

from tdswire.collation import Collation
from tdswire.column_data import ColumnData, ColumnKind
from tdswire.guid import reorder_bytes
from tdswire.numeric import Numeric
from tdswire.plp import ReadTyMode, decode_plp, decode_variable_string
from tdswire.reader import ByteReader, EncodingError, ProtocolError
from tdswire.temporal import Date, DateTime, DateTime2, DateTimeOffset, SmallDateTime, Time
from tdswire.type_info import (
    FixedLen,
    FixedLenType,
    TypeInfo,
    VarLenSized,
    VarLenSizedPrecision,
    VarLenType,
    XmlType,
)

_FIXED_PLAIN: dict[FixedLenType, tuple[ColumnKind, Callable[[ByteReader], object]]] = {
    FixedLenType.Int1: (ColumnKind.U8, ByteReader.read_u8),
    FixedLenType.Int2: (ColumnKind.I16, ByteReader.read_i16_le),
    FixedLenType.Int4: (ColumnKind.I32, ByteReader.read_i32_le),
    FixedLenType.Int8: (ColumnKind.I64, ByteReader.read_i64_le),
    FixedLenType.Float4: (ColumnKind.F32, ByteReader.read_f32_le),
    FixedLenType.Float8: (ColumnKind.F64, ByteReader.read_f64_le),
}


def decode_column(reader: ByteReader, type_info: TypeInfo) -> ColumnData:
    """Read one value of the described type from the reader."""
    if isinstance(type_info, FixedLen):
        return _decode_fixed_len(reader, type_info.ty)
    if isinstance(type_info, VarLenSized):
        return _decode_var_len(reader, type_info.ty, type_info.size, type_info.collation)
    if isinstance(type_info, VarLenSizedPrecision):
        if type_info.ty in (VarLenType.Decimaln, VarLenType.Numericn):
            return ColumnData(ColumnKind.NUMERIC, Numeric.decode(reader, type_info.scale))
        raise ProtocolError(f"unsupported precision type: {type_info.ty.name}")
    if isinstance(type_info, XmlType):
        text = decode_variable_string(reader, VarLenType.Xml, type_info.size)
        return ColumnData(ColumnKind.XML, text)
    raise TypeError(f"unknown type info: {type_info!r}")


def _decode_fixed_len(reader: ByteReader, ty: FixedLenType) -> ColumnData:
    if ty == FixedLenType.Null:
        return ColumnData(ColumnKind.BIT)
    if ty == FixedLenType.Bit:
        return ColumnData(ColumnKind.BIT, reader.read_u8() != 0)
    if ty in _FIXED_PLAIN:
        kind, read = _FIXED_PLAIN[ty]
        return ColumnData(kind, read(reader))
    if ty == FixedLenType.Datetime:
        return _decode_datetimen(reader, 8)
    if ty == FixedLenType.Datetime4:
        return _decode_datetimen(reader, 4)
    if ty == FixedLenType.Money4:
        return _decode_money(reader, 4)
    return _decode_money(reader, 8)


def _decode_datetimen(reader: ByteReader, length: int) -> ColumnData:
    if length == 0:
        return ColumnData(ColumnKind.SMALL_DATETIME)
    if length == 4:
        return ColumnData(ColumnKind.SMALL_DATETIME, SmallDateTime.decode(reader))
    if length == 8:
        return ColumnData(ColumnKind.DATETIME, DateTime.decode(reader))
    raise ProtocolError(f"datetimen: length of {length} is invalid")


def _decode_money(reader: ByteReader, length: int) -> ColumnData:
    if length == 0:
        return ColumnData(ColumnKind.F64)
    if length == 4:
        return ColumnData(ColumnKind.F64, reader.read_i32_le() / 1e4)
    if length == 8:
        high = reader.read_i32_le()
        low = reader.read_u32_le()
        return ColumnData(ColumnKind.F64, (float(high << 32) + float(low)) / 1e4)
    raise ProtocolError(f"money: length of {length} is invalid")


def _decode_bit(reader: ByteReader) -> ColumnData:
    length = reader.read_u8()
    if length == 0:
        return ColumnData(ColumnKind.BIT)
    if length == 1:
        return ColumnData(ColumnKind.BIT, reader.read_u8() > 0)
    raise ProtocolError(f"bitn: length of {length} is invalid")


def _decode_int(reader: ByteReader) -> ColumnData:
    length = reader.read_u8()
    if length == 0:
        return ColumnData(ColumnKind.U8)
    if length == 1:
        return ColumnData(ColumnKind.U8, reader.read_u8())
    if length == 2:
        return ColumnData(ColumnKind.I16, reader.read_i16_le())
    if length == 4:
        return ColumnData(ColumnKind.I32, reader.read_i32_le())
    if length == 8:
        return ColumnData(ColumnKind.I64, reader.read_i64_le())
    raise ProtocolError(f"intn: length of {length} is invalid")


def _decode_float(reader: ByteReader) -> ColumnData:
    length = reader.read_u8()
    if length == 0:
        return ColumnData(ColumnKind.F32)
    if length == 4:
        return ColumnData(ColumnKind.F32, reader.read_f32_le())
    if length == 8:
        return ColumnData(ColumnKind.F64, reader.read_f64_le())
    raise ProtocolError(f"floatn: length of {length} is invalid")


def _decode_guid(reader: ByteReader) -> ColumnData:
    length = reader.read_u8()
    if length == 0:
        return ColumnData(ColumnKind.GUID)
    if length == 16:
        return ColumnData(ColumnKind.GUID, uuid.UUID(bytes=reorder_bytes(reader.read_exact(16))))
    raise ProtocolError(f"guid: length of {length} is invalid")


def _decode_date(reader: ByteReader) -> ColumnData:
    length = reader.read_u8()
    if length == 0:
        return ColumnData(ColumnKind.DATE)
    if length == 3:
        return ColumnData(ColumnKind.DATE, Date.decode(reader))
    raise ProtocolError(f"daten: length of {length} is invalid")


def _decode_time(reader: ByteReader, scale: int) -> ColumnData:
    rlen = reader.read_u8()
    if rlen == 0:
        return ColumnData(ColumnKind.TIME)
    return ColumnData(ColumnKind.TIME, Time.decode(reader, scale, rlen))


def _decode_datetime2(reader: ByteReader, scale: int) -> ColumnData:
    rlen = reader.read_u8()
    if rlen == 0:
        return ColumnData(ColumnKind.DATETIME2)
    return ColumnData(ColumnKind.DATETIME2, DateTime2.decode(reader, scale, rlen - 3))


def _decode_datetime_offset(reader: ByteReader, scale: int) -> ColumnData:
    rlen = reader.read_u8()
    if rlen == 0:
        return ColumnData(ColumnKind.DATETIME_OFFSET)
    return ColumnData(
        ColumnKind.DATETIME_OFFSET, DateTimeOffset.decode(reader, scale, rlen - 5)
    )


def _decode_big_varchar(
    reader: ByteReader, size: int, collation: Collation | None
) -> ColumnData:
    data = decode_plp(reader, ReadTyMode.auto(size))
    if data is None:
        return ColumnData(ColumnKind.STRING)
    if collation is None:
        raise ProtocolError("varchar: missing collation")
    codec = collation.encoding()
    if codec is None:
        raise EncodingError("encoding: unsupported encoding")
    try:
        return ColumnData(ColumnKind.STRING, data.decode(codec, "strict"))
    except UnicodeDecodeError as exc:
        raise EncodingError(f"invalid {codec} data: {exc}") from exc


def _decode_binary(reader: ByteReader, size: int) -> ColumnData:
    return ColumnData(ColumnKind.BINARY, decode_plp(reader, ReadTyMode.auto(size)))


def _skip_text_pointer(reader: ByteReader) -> bool:
    """Skip the text pointer and timestamp; False if the value is NULL."""
    ptr_len = reader.read_u8()
    if ptr_len == 0:
        return False
    reader.read_exact(ptr_len)
    reader.read_i32_le()  # days
    reader.read_u32_le()  # second fractions
    return True


def _decode_text(reader: ByteReader) -> ColumnData:
    if not _skip_text_pointer(reader):
        return ColumnData(ColumnKind.STRING)
    raw = reader.read_exact(reader.read_u32_le())
    try:
        return ColumnData(ColumnKind.STRING, raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise EncodingError(f"invalid UTF-8 data: {exc}") from exc


def _decode_ntext(reader: ByteReader) -> ColumnData:
    if not _skip_text_pointer(reader):
        return ColumnData(ColumnKind.STRING)
    units = reader.read_u32_le() // 2
    raw = reader.read_exact(units * 2)
    try:
        return ColumnData(ColumnKind.STRING, raw.decode("utf-16-le"))
    except UnicodeDecodeError as exc:
        raise EncodingError(f"invalid UTF-16 data: {exc}") from exc


def _decode_image(reader: ByteReader) -> ColumnData:
    if not _skip_text_pointer(reader):
        return ColumnData(ColumnKind.BINARY)
    return ColumnData(ColumnKind.BINARY, reader.read_exact(reader.read_u32_le()))


def _decode_var_len(
    reader: ByteReader, ty: VarLenType, size: int, collation: Collation | None
) -> ColumnData:
    if ty == VarLenType.Bitn:
        return _decode_bit(reader)
    if ty == VarLenType.Intn:
        return _decode_int(reader)
    if ty == VarLenType.Floatn:
        return _decode_float(reader)
    if ty == VarLenType.Guid:
        return _decode_guid(reader)
    if ty in (VarLenType.BigChar, VarLenType.NChar, VarLenType.NVarchar):
        return ColumnData(ColumnKind.STRING, decode_variable_string(reader, ty, size))
    if ty == VarLenType.BigVarChar:
        return _decode_big_varchar(reader, size, collation)
    if ty == VarLenType.Money:
        return _decode_money(reader, reader.read_u8())
    if ty == VarLenType.Datetimen:
        return _decode_datetimen(reader, reader.read_u8())
    if ty == VarLenType.Daten:
        return _decode_date(reader)
    if ty == VarLenType.Timen:
        return _decode_time(reader, size)
    if ty == VarLenType.Datetime2:
        return _decode_datetime2(reader, size)
    if ty == VarLenType.DatetimeOffsetn:
        return _decode_datetime_offset(reader, size)
    if ty in (VarLenType.BigBinary, VarLenType.BigVarBin):
        return _decode_binary(reader, size)
    if ty == VarLenType.Text:
        return _decode_text(reader)
    if ty == VarLenType.NText:
        return _decode_ntext(reader)
    if ty == VarLenType.Image:
        return _decode_image(reader)
    raise ProtocolError(f"unsupported column type: {ty.name}")