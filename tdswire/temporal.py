"""Date and time values in their wire form."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from tdswire.reader import ByteReader, ProtocolError


def _check_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} out of range [{low}, {high}]: {value}")


@dataclass(frozen=True)
class DateTime:
    """A ``datetime`` value: days since 1900-01-01 and 1/300 s since midnight."""

    days: int
    seconds_fragments: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, -(1 << 31), (1 << 31) - 1)
        _check_range("seconds_fragments", self.seconds_fragments, 0, (1 << 32) - 1)

    def encode(self) -> bytes:
        return struct.pack("<iI", self.days, self.seconds_fragments)

    @classmethod
    def decode(cls, reader: ByteReader) -> DateTime:
        return cls(reader.read_i32_le(), reader.read_u32_le())


@dataclass(frozen=True)
class SmallDateTime:
    """A ``smalldatetime`` value: days since 1900-01-01 and a 16-bit time part."""

    days: int
    seconds_fragments: int

    def __post_init__(self) -> None:
        _check_range("days", self.days, 0, 0xFFFF)
        _check_range("seconds_fragments", self.seconds_fragments, 0, 0xFFFF)

    def encode(self) -> bytes:
        return struct.pack("<HH", self.days, self.seconds_fragments)

    @classmethod
    def decode(cls, reader: ByteReader) -> SmallDateTime:
        return cls(reader.read_u16_le(), reader.read_u16_le())


@dataclass(frozen=True)
class Date:
    """A ``date`` value: days since 0001-01-01, stored in three bytes."""

    days: int

    def __post_init__(self) -> None:
        if self.days < 0 or self.days >> 24:
            raise ValueError(f"date days must fit in three bytes: {self.days}")

    def encode(self) -> bytes:
        return self.days.to_bytes(3, "little")

    @classmethod
    def decode(cls, reader: ByteReader) -> Date:
        return cls(int.from_bytes(reader.read_exact(3), "little"))


@dataclass(frozen=True, eq=False)
class Time:
    """A ``time`` value: increments of 10^-scale seconds since midnight."""

    increments: int
    scale: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self.increments / 10.0 ** self.scale == other.increments / 10.0 ** other.scale

    def __hash__(self) -> int:
        return hash(self.increments / 10.0 ** self.scale)

    def byte_len(self) -> int:
        """Length of the encoded field in bytes."""
        if 0 <= self.scale <= 2:
            return 3
        if 3 <= self.scale <= 4:
            return 4
        if 5 <= self.scale <= 7:
            return 5
        raise ProtocolError(f"timen: invalid scale {self.scale}")

    def encode(self) -> bytes:
        length = self.byte_len()
        if self.increments < 0 or self.increments >> (8 * length):
            raise ValueError(
                f"time increments {self.increments} do not fit in {length} bytes"
            )
        return self.increments.to_bytes(length, "little")

    @classmethod
    def decode(cls, reader: ByteReader, n: int, rlen: int) -> Time:
        if 0 <= n <= 2 and rlen == 3:
            low = reader.read_u16_le()
            value = low | reader.read_u8() << 16
        elif 3 <= n <= 4 and rlen == 4:
            value = reader.read_u32_le()
        elif 5 <= n <= 7 and rlen == 5:
            low = reader.read_u32_le()
            value = low | reader.read_u8() << 32
        else:
            raise ProtocolError(f"timen: invalid length {n}")
        return cls(value, n)


@dataclass(frozen=True)
class DateTime2:
    """A ``datetime2`` value made of a date and a time."""

    date: Date
    time: Time

    def encode(self) -> bytes:
        return self.time.encode() + self.date.encode()

    @classmethod
    def decode(cls, reader: ByteReader, n: int, rlen: int) -> DateTime2:
        time = Time.decode(reader, n, rlen)
        date = Date.decode(reader)
        return cls(date, time)


@dataclass(frozen=True)
class DateTimeOffset:
    """A ``datetimeoffset`` value: a datetime2 and an offset in minutes from UTC."""

    datetime2: DateTime2
    offset: int

    def __post_init__(self) -> None:
        _check_range("offset", self.offset, -(1 << 15), (1 << 15) - 1)

    def encode(self) -> bytes:
        return self.datetime2.encode() + struct.pack("<h", self.offset)

    @classmethod
    def decode(cls, reader: ByteReader, n: int, rlen: int) -> DateTimeOffset:
        datetime2 = DateTime2.decode(reader, n, rlen)
        return cls(datetime2, reader.read_i16_le())