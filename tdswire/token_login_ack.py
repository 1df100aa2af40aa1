"""The LOGINACK token confirming a successful login."""

from __future__ import annotations

from dataclasses import dataclass

from tdswire.login import FeatureLevel
from tdswire.reader import ByteReader, ProtocolError


@dataclass(frozen=True)
class TokenLoginAck:
    """Interface, protocol version and server program accepted at login."""

    interface: int
    tds_version: FeatureLevel
    prog_name: str
    version: int

    @classmethod
    def decode(cls, reader: ByteReader) -> TokenLoginAck:
        reader.read_u16_le()  # token length
        interface = reader.read_u8()
        raw_version = reader.read_u32_be()
        try:
            tds_version = FeatureLevel(raw_version)
        except ValueError:
            raise ProtocolError("Login ACK: Invalid TDS version") from None
        prog_name = reader.read_b_varchar()
        version = reader.read_u32_le()
        return cls(interface, tds_version, prog_name, version)