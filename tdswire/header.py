"""The eight-byte header in front of every packet."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from tdswire.reader import ProtocolError

HEADER_BYTES = 8

_HEADER = struct.Struct(">BBHHBB")


class PacketType(IntEnum):
    """The kind of message a packet belongs to."""

    SQLBatch = 1
    PreTDSv7Login = 2
    RPC = 3
    TabularResult = 4
    AttentionSignal = 6
    BulkLoad = 7
    Fat = 8
    TransactionManagerReq = 14
    TDSv7Login = 16
    SSPI = 17
    PreLogin = 18


class PacketStatus(IntEnum):
    """The message state of a packet."""

    NormalMessage = 0
    EndOfMessage = 1
    IgnoreEvent = 3
    ResetConnection = 0x08
    ResetConnectionSkipTran = 0x10


@dataclass
class PacketHeader:
    """Packet header; length and spid are big-endian on the wire."""

    ty: PacketType
    status: PacketStatus
    length: int = 0
    spid: int = 0
    packet_id: int = 0
    window: int = 0

    @classmethod
    def create(cls, length: int, packet_id: int) -> PacketHeader:
        """A login header with the reset-connection status."""
        if not 0 <= length <= 0xFFFF:
            raise ValueError(f"packet length must fit in 16 bits: {length}")
        return cls(
            ty=PacketType.TDSv7Login,
            status=PacketStatus.ResetConnection,
            length=length,
            packet_id=packet_id,
        )

    @classmethod
    def rpc(cls, packet_id: int) -> PacketHeader:
        return cls(PacketType.RPC, PacketStatus.NormalMessage, packet_id=packet_id)

    @classmethod
    def pre_login(cls, packet_id: int) -> PacketHeader:
        return cls(PacketType.PreLogin, PacketStatus.EndOfMessage, packet_id=packet_id)

    @classmethod
    def login(cls, packet_id: int) -> PacketHeader:
        return cls(PacketType.TDSv7Login, PacketStatus.EndOfMessage, packet_id=packet_id)

    @classmethod
    def batch(cls, packet_id: int) -> PacketHeader:
        return cls(PacketType.SQLBatch, PacketStatus.NormalMessage, packet_id=packet_id)

    def encode(self) -> bytes:
        return _HEADER.pack(
            self.ty, self.status, self.length, self.spid, self.packet_id, self.window
        )

    @classmethod
    def decode(cls, data: bytes | bytearray | memoryview) -> PacketHeader:
        """Parse the first eight bytes of ``data``."""
        if len(data) < HEADER_BYTES:
            raise ProtocolError(
                f"header: need {HEADER_BYTES} bytes, got {len(data)}"
            )
        raw_ty, raw_status, length, spid, packet_id, window = _HEADER.unpack_from(data)
        try:
            ty = PacketType(raw_ty)
        except ValueError:
            raise ProtocolError(f"header: invalid packet type: {raw_ty}") from None
        try:
            status = PacketStatus(raw_status)
        except ValueError:
            raise ProtocolError("header: invalid packet status") from None
        return cls(ty, status, length, spid, packet_id, window)