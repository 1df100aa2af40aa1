"""Reading length-prefixed and partially length-prefixed (PLP) values."""

from __future__ import annotations

from dataclasses import dataclass

from tdswire.reader import ByteReader, EncodingError, ProtocolError
from tdswire.type_info import VarLenType

_FIXED_NULL = 0xFFFF
_PLP_NULL = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class ReadTyMode:
    """How a value is framed: a two-byte length, or PLP chunks when size is None."""

    size: int | None = None

    @property
    def is_plp(self) -> bool:
        """Whether the value is sent as PLP chunks."""
        return self.size is None

    @classmethod
    def auto(cls, size: int) -> ReadTyMode:
        """Fixed framing below 0xFFFF, PLP framing from there on."""
        if size < 0xFFFF:
            return cls(size)
        return cls(None)


def decode_plp(reader: ByteReader, mode: ReadTyMode) -> bytes | None:
    """Read a framed value; None stands for NULL."""
    if not mode.is_plp:
        size = reader.read_u16_le()
        if size == _FIXED_NULL:
            return None
        return reader.read_exact(size)

    total = reader.read_u64_le()
    if total == _PLP_NULL:
        return None
    # A known total and the unknown-length marker are both followed by chunks.
    chunks = []
    while chunk_size := reader.read_u32_le():
        chunks.append(reader.read_exact(chunk_size))
    return b"".join(chunks)


def decode_variable_string(
    reader: ByteReader, ty: VarLenType, length: int
) -> str | None:
    """Read a character value of the given type; None stands for NULL."""
    if ty in (VarLenType.NChar, VarLenType.BigChar):
        mode = ReadTyMode(length)
    else:
        mode = ReadTyMode.auto(length)

    data = decode_plp(reader, mode)
    if data is None:
        return None

    if ty == VarLenType.BigChar:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncodingError(f"invalid UTF-8 data: {exc}") from exc

    if len(data) % 2:
        raise ProtocolError("nvarchar: invalid plp length")
    try:
        return data.decode("utf-16-le")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"invalid UTF-16 data: {exc}") from exc