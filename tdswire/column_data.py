"""Typed column values and their wire form as parameters."""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from tdswire.guid import reorder_bytes
from tdswire.numeric import Numeric
from tdswire.temporal import Date, DateTime, DateTime2, DateTimeOffset, SmallDateTime, Time
from tdswire.type_info import FixedLenType, VarLenType

MAX_NVARCHAR_SIZE = 1 << 30
_PLP_UNKNOWN_LENGTH = 0xFFFFFFFFFFFFFFFE
_NULL = bytes((FixedLenType.Null,))


class ColumnKind(Enum):
    """The kind of value a column holds."""

    U8 = "u8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"
    BIT = "bit"
    STRING = "string"
    GUID = "guid"
    BINARY = "binary"
    NUMERIC = "numeric"
    XML = "xml"
    DATETIME = "datetime"
    SMALL_DATETIME = "smalldatetime"
    TIME = "time"
    DATE = "date"
    DATETIME2 = "datetime2"
    DATETIME_OFFSET = "datetimeoffset"


_INT_RANGES = {
    ColumnKind.U8: (0, 0xFF),
    ColumnKind.I16: (-(1 << 15), (1 << 15) - 1),
    ColumnKind.I32: (-(1 << 31), (1 << 31) - 1),
    ColumnKind.I64: (-(1 << 63), (1 << 63) - 1),
}

_VALUE_TYPES: dict[ColumnKind, tuple[type, ...]] = {
    ColumnKind.U8: (int,),
    ColumnKind.I16: (int,),
    ColumnKind.I32: (int,),
    ColumnKind.I64: (int,),
    ColumnKind.F32: (int, float),
    ColumnKind.F64: (int, float),
    ColumnKind.BIT: (bool,),
    ColumnKind.STRING: (str,),
    ColumnKind.GUID: (uuid.UUID,),
    ColumnKind.BINARY: (bytes, bytearray, memoryview),
    ColumnKind.NUMERIC: (Numeric,),
    ColumnKind.XML: (str,),
    ColumnKind.DATETIME: (DateTime,),
    ColumnKind.SMALL_DATETIME: (SmallDateTime,),
    ColumnKind.TIME: (Time,),
    ColumnKind.DATE: (Date,),
    ColumnKind.DATETIME2: (DateTime2,),
    ColumnKind.DATETIME_OFFSET: (DateTimeOffset,),
}

_FIXED_NAMES = {
    ColumnKind.U8: "tinyint",
    ColumnKind.I16: "smallint",
    ColumnKind.I32: "int",
    ColumnKind.I64: "bigint",
    ColumnKind.F32: "float(24)",
    ColumnKind.F64: "float(53)",
    ColumnKind.BIT: "bit",
    ColumnKind.GUID: "uniqueidentifier",
    ColumnKind.XML: "xml",
    ColumnKind.DATETIME: "datetime",
    ColumnKind.SMALL_DATETIME: "smalldatetime",
    ColumnKind.TIME: "time",
    ColumnKind.DATE: "date",
    ColumnKind.DATETIME2: "datetime2",
    ColumnKind.DATETIME_OFFSET: "datetimeoffset",
}


@dataclass(frozen=True)
class ColumnData:
    """A value of a given kind; a value of None stands for NULL."""

    kind: ColumnKind
    value: Any = None

    def __post_init__(self) -> None:
        if self.value is None:
            return
        expected = _VALUE_TYPES[self.kind]
        if not isinstance(self.value, expected):
            raise TypeError(
                f"{self.kind.name} expects {', '.join(t.__name__ for t in expected)}, "
                f"got {type(self.value).__name__}"
            )
        if self.kind in _INT_RANGES:
            low, high = _INT_RANGES[self.kind]
            if not low <= self.value <= high:
                raise ValueError(f"{self.kind.name} value out of range: {self.value}")
        elif self.kind in (ColumnKind.F32, ColumnKind.F64):
            object.__setattr__(self, "value", float(self.value))
        elif self.kind == ColumnKind.BINARY:
            object.__setattr__(self, "value", bytes(self.value))

    def type_name(self) -> str:
        """The SQL type used to declare a parameter holding this value."""
        kind, value = self.kind, self.value
        if kind in _FIXED_NAMES:
            return _FIXED_NAMES[kind]
        if kind == ColumnKind.STRING:
            if value is None:
                return "nvarchar(4000)"
            size = len(value.encode("utf-8"))
            if size <= 4000:
                return "nvarchar(4000)"
            if size <= MAX_NVARCHAR_SIZE:
                return "nvarchar(max)"
            return "ntext(max)"
        if kind == ColumnKind.BINARY:
            if value is not None and len(value) <= 8000:
                return "varbinary(8000)"
            return "varbinary(max)"
        if value is None:
            return "numeric"
        return f"numeric({value.precision()},{value.scale})"

    def encode(self) -> bytes:
        """Type info followed by the value, as sent in an RPC parameter."""
        kind, value = self.kind, self.value
        if value is None:
            return _NULL

        if kind == ColumnKind.BIT:
            return bytes((VarLenType.Bitn, 1, 1, int(value)))
        if kind == ColumnKind.U8:
            return bytes((VarLenType.Intn, 1, 1, value))
        if kind == ColumnKind.I16:
            return bytes((VarLenType.Intn, 2, 2)) + struct.pack("<h", value)
        if kind == ColumnKind.I32:
            return bytes((VarLenType.Intn, 4, 4)) + struct.pack("<i", value)
        if kind == ColumnKind.I64:
            return bytes((VarLenType.Intn, 8, 8)) + struct.pack("<q", value)
        if kind == ColumnKind.F32:
            return bytes((VarLenType.Floatn, 4, 4)) + struct.pack("<f", value)
        if kind == ColumnKind.F64:
            return bytes((VarLenType.Floatn, 8, 8)) + struct.pack("<d", value)
        if kind == ColumnKind.GUID:
            return bytes((VarLenType.Guid, 16, 16)) + reorder_bytes(value.bytes)
        if kind == ColumnKind.STRING:
            return _encode_string(value)
        if kind == ColumnKind.BINARY:
            return _encode_binary(value)
        if kind == ColumnKind.DATETIME:
            return bytes((VarLenType.Datetimen, 8, 8)) + value.encode()
        if kind == ColumnKind.SMALL_DATETIME:
            return bytes((VarLenType.Datetimen, 4, 4)) + value.encode()
        if kind == ColumnKind.TIME:
            return bytes((VarLenType.Timen, value.scale, value.byte_len())) + value.encode()
        if kind == ColumnKind.DATE:
            return bytes((VarLenType.Daten, 3)) + value.encode()
        if kind == ColumnKind.DATETIME2:
            time = value.time
            return bytes((VarLenType.Datetime2, time.scale, time.byte_len() + 3)) + value.encode()
        if kind == ColumnKind.DATETIME_OFFSET:
            time = value.datetime2.time
            return (
                bytes((VarLenType.DatetimeOffsetn, time.scale, time.byte_len() + 5))
                + value.encode()
            )
        if kind == ColumnKind.NUMERIC:
            return (
                bytes((VarLenType.Numericn, value.byte_len(), value.precision(), value.scale))
                + value.encode()
            )
        raise ValueError("xml values cannot be sent as parameters")


def _encode_string(text: str) -> bytes:
    raw = text.encode("utf-16-le")
    head = bytes((VarLenType.NVarchar,))
    collation = bytes(5)
    if len(text.encode("utf-8")) <= 4000:
        return head + struct.pack("<H", 8000) + collation + struct.pack("<H", len(raw)) + raw
    return (
        head
        + b"\xff\xff"
        + collation
        + struct.pack("<QI", _PLP_UNKNOWN_LENGTH, len(raw))
        + raw
        + struct.pack("<I", 0)
    )


def _encode_binary(data: bytes) -> bytes:
    head = bytes((VarLenType.BigVarBin,))
    if len(data) <= 8000:
        return head + struct.pack("<HH", 8000, len(data)) + data
    return (
        head
        + struct.pack("<HQI", 0xFFFF, _PLP_UNKNOWN_LENGTH, len(data))
        + data
        + struct.pack("<I", 0)
    )