"""Little-endian byte reader used by the decoders of the wire format."""

from __future__ import annotations

import struct


class ProtocolError(Exception):
    """The data received does not follow the wire protocol."""


class EncodingError(Exception):
    """Text in the data could not be decoded."""


_U8 = struct.Struct("<B")
_U16_LE = struct.Struct("<H")
_U16_BE = struct.Struct(">H")
_I16_LE = struct.Struct("<h")
_U32_LE = struct.Struct("<I")
_U32_BE = struct.Struct(">I")
_I32_LE = struct.Struct("<i")
_U64_LE = struct.Struct("<Q")
_I64_LE = struct.Struct("<q")
_F32_LE = struct.Struct("<f")
_F64_LE = struct.Struct("<d")


class ByteReader:
    """Sequential reader over an in-memory buffer."""

    def __init__(self, data: bytes | bytearray | memoryview = b"") -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        """Number of bytes consumed so far."""
        return self._pos

    @property
    def remaining(self) -> int:
        """Number of bytes still available."""
        return len(self._data) - self._pos

    def is_eof(self) -> bool:
        """Whether every byte has been consumed."""
        return self._pos >= len(self._data)

    def read_exact(self, size: int) -> bytes:
        """Return exactly ``size`` bytes or raise ProtocolError."""
        if size < 0:
            raise ValueError(f"cannot read a negative number of bytes: {size}")
        end = self._pos + size
        if end > len(self._data):
            raise ProtocolError(
                f"unexpected end of data: wanted {size} bytes, {self.remaining} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.read_exact(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16_le(self) -> int:
        return self._unpack(_U16_LE)

    def read_u16_be(self) -> int:
        return self._unpack(_U16_BE)

    def read_i16_le(self) -> int:
        return self._unpack(_I16_LE)

    def read_u32_le(self) -> int:
        return self._unpack(_U32_LE)

    def read_u32_be(self) -> int:
        return self._unpack(_U32_BE)

    def read_i32_le(self) -> int:
        return self._unpack(_I32_LE)

    def read_u64_le(self) -> int:
        return self._unpack(_U64_LE)

    def read_i64_le(self) -> int:
        return self._unpack(_I64_LE)

    def read_f32_le(self) -> float:
        return self._unpack(_F32_LE)

    def read_f64_le(self) -> float:
        return self._unpack(_F64_LE)

    def _read_utf16(self, units: int) -> str:
        raw = self.read_exact(units * 2)
        try:
            return raw.decode("utf-16-le")
        except UnicodeDecodeError as exc:
            raise EncodingError(f"invalid UTF-16 data: {exc}") from exc

    def read_b_varchar(self) -> str:
        """Read a UTF-16 string prefixed by a one-byte character count."""
        return self._read_utf16(self.read_u8())

    def read_us_varchar(self) -> str:
        """Read a UTF-16 string prefixed by a two-byte character count."""
        return self._read_utf16(self.read_u16_le())