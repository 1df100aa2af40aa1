"""The decimal/numeric value type and its wire form."""

from __future__ import annotations

import decimal
import struct
from fractions import Fraction

from tdswire.reader import ByteReader, ProtocolError

MAX_SCALE = 37

_U32_MASK = (1 << 32) - 1
_U64_MASK = (1 << 64) - 1
_U128_MASK = (1 << 128) - 1


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


class Numeric:
    """A decimal number stored as an integer and a scale, up to 38 digits."""

    __slots__ = ("_value", "_scale")

    def __init__(self, value: int, scale: int) -> None:
        if not 0 <= scale <= MAX_SCALE:
            raise ValueError(f"scale must be between 0 and {MAX_SCALE}, got {scale}")
        self._value = int(value)
        self._scale = int(scale)

    @property
    def value(self) -> int:
        """The unscaled integer value."""
        return self._value

    @property
    def scale(self) -> int:
        """Number of digits after the decimal point."""
        return self._scale

    def _pow_scale(self) -> int:
        return 10 ** self._scale

    def dec_part(self) -> int:
        """The digits after the decimal point, carrying the sign of the value."""
        p = self._pow_scale()
        return self._value - _trunc_div(self._value, p) * p

    def int_part(self) -> int:
        """The integer part, truncated toward zero."""
        return _trunc_div(self._value, self._pow_scale())

    def precision(self) -> int:
        """Total number of digits: integer digits (at least one) plus the scale."""
        n = abs(self.int_part())
        digits = len(str(n)) if n else 0
        return (digits or 1) + self._scale

    def byte_len(self) -> int:
        """Length in bytes of the encoded value, sign byte included."""
        p = self.precision()
        if 1 <= p <= 9:
            return 5
        if 10 <= p <= 19:
            return 9
        if 20 <= p <= 28:
            return 13
        return 17

    def encode(self) -> bytes:
        """Length byte, sign byte and magnitude in little-endian order."""
        length = self.byte_len()
        sign = 0 if self._value < 0 else 1
        magnitude = abs(self._value)
        if length == 5:
            body = struct.pack("<I", magnitude & _U32_MASK)
        elif length == 9:
            body = struct.pack("<Q", magnitude & _U64_MASK)
        elif length == 13:
            body = struct.pack("<QI", magnitude & _U64_MASK, (magnitude >> 64) & _U32_MASK)
        else:
            body = (magnitude & _U128_MASK).to_bytes(16, "little")
        return bytes((length, sign)) + body

    @classmethod
    def decode(cls, reader: ByteReader, scale: int) -> Numeric | None:
        """Read a value; a zero length byte stands for NULL and gives None."""
        length = reader.read_u8()
        if length == 0:
            return None
        sign_byte = reader.read_u8()
        if sign_byte == 0:
            sign = -1
        elif sign_byte == 1:
            sign = 1
        else:
            raise ProtocolError("decimal: invalid sign")
        if length == 5:
            magnitude = reader.read_u32_le()
        elif length == 9:
            magnitude = reader.read_u64_le()
        elif length in (13, 17):
            magnitude = int.from_bytes(reader.read_exact(length - 1), "little")
        else:
            raise ProtocolError(f"decimal/numeric: invalid length of {length} received")
        return cls(magnitude * sign, scale)

    def to_decimal(self) -> decimal.Decimal:
        """Exact conversion to ``decimal.Decimal``."""
        digits = tuple(int(d) for d in str(abs(self._value)))
        return decimal.Decimal((1 if self._value < 0 else 0, digits, -self._scale))

    @classmethod
    def from_decimal(cls, value: decimal.Decimal) -> Numeric:
        """Exact conversion from a finite ``decimal.Decimal``."""
        if not value.is_finite():
            raise ValueError(f"cannot represent {value} as a numeric")
        sign, digits, exponent = value.as_tuple()
        magnitude = int("".join(map(str, digits)) or "0")
        if exponent > 0:
            magnitude *= 10 ** exponent
            scale = 0
        else:
            scale = -exponent
        return cls(-magnitude if sign else magnitude, scale)

    def __float__(self) -> float:
        return self.dec_part() / self._pow_scale() + float(self.int_part())

    def __int__(self) -> int:
        return self.int_part()

    def __str__(self) -> str:
        dec = self.dec_part()
        dec_text = format(dec, f"0{self._scale}d") if self._scale else str(dec)
        return f"{self.int_part()}.{dec_text}"

    def __repr__(self) -> str:
        return f"Numeric({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Numeric):
            return NotImplemented
        if self._scale < other._scale:
            return 10 ** (other._scale - self._scale) * self._value == other._value
        if self._scale > other._scale:
            return 10 ** (self._scale - other._scale) * other._value == self._value
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(Fraction(self._value, self._pow_scale()))