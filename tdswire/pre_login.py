"""The pre-login message exchanged before authentication."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from tdswire.reader import ByteReader, ProtocolError

_TOKEN_VERSION = 0x00
_TOKEN_ENCRYPTION = 0x01
_TOKEN_THREAD_ID = 0x03
_TOKEN_MARS = 0x04
_TERMINATOR = 0xFF


class EncryptionLevel(IntEnum):
    """Encryption requested by the client or offered by the server."""

    Off = 0
    On = 1
    NotSupported = 2
    Required = 3


@dataclass
class PreloginMessage:
    """Version, encryption, thread id and MARS options of a pre-login."""

    version: int = 0
    sub_build: int = 0
    encryption: EncryptionLevel = EncryptionLevel.NotSupported
    thread_id: int = 0
    mars: bool = False

    def negotiated_encryption(self, expected: EncryptionLevel) -> EncryptionLevel:
        """The level both sides agree on for the level the client expects."""
        server = self.encryption
        if expected == EncryptionLevel.NotSupported and server == EncryptionLevel.NotSupported:
            return EncryptionLevel.NotSupported
        if expected == EncryptionLevel.Off and server == EncryptionLevel.Off:
            return EncryptionLevel.Off
        if expected == EncryptionLevel.On and server in (
            EncryptionLevel.Off,
            EncryptionLevel.NotSupported,
        ):
            raise ProtocolError("Server does not allow the requested encryption level.")
        return EncryptionLevel.On

    def encode(self) -> bytes:
        options = (
            (_TOKEN_VERSION, 6),
            (_TOKEN_ENCRYPTION, 1),
            (_TOKEN_THREAD_ID, 4),
            (_TOKEN_MARS, 1),
        )
        out = bytearray()
        offset = 5 * len(options) + 1
        for token, length in options:
            out += struct.pack(">BHH", token, offset, length)
            offset += length
        out.append(_TERMINATOR)
        out += struct.pack(
            ">IHBIB",
            self.version,
            self.sub_build,
            self.encryption,
            self.thread_id,
            int(self.mars),
        )
        return bytes(out)

    @classmethod
    def decode(cls, data: bytes | bytearray | memoryview) -> PreloginMessage:
        data = bytes(data)
        reader = ByteReader(data)
        message = cls()

        while True:
            token = reader.read_u8()
            if token == _TERMINATOR:
                break
            offset = reader.read_u16_be()
            reader.read_u16_be()  # option length
            body = ByteReader(data[offset:])

            if token == _TOKEN_VERSION:
                message.version = body.read_u32_be()
                message.sub_build = body.read_u16_be()
            elif token == _TOKEN_ENCRYPTION:
                raw = body.read_u8()
                try:
                    message.encryption = EncryptionLevel(raw)
                except ValueError:
                    raise ProtocolError(f"invalid encryption value: {raw}") from None
            elif token in (_TOKEN_THREAD_ID, _TOKEN_MARS):
                pass
            else:
                raise ProtocolError(f"unsupported prelogin token: {token}")

        return message