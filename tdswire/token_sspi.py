"""The SSPI token carrying an authentication blob."""

from __future__ import annotations

from dataclasses import dataclass

from tdswire.reader import ByteReader


@dataclass(frozen=True)
class TokenSSPI:
    """An opaque SSPI payload."""

    data: bytes

    def __bytes__(self) -> bytes:
        return bytes(self.data)

    @classmethod
    def decode(cls, reader: ByteReader) -> TokenSSPI:
        """Read a two-byte length followed by that many bytes."""
        length = reader.read_u16_le()
        return cls(reader.read_exact(length))

    def encode(self) -> bytes:
        """The payload as is, without a length prefix."""
        return bytes(self.data)