"""Packets and the framing codec that splits a byte stream into them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from tdswire.header import HEADER_BYTES, PacketHeader, PacketStatus
from tdswire.reader import ProtocolError

_log = logging.getLogger(__name__)


@dataclass
class Packet:
    """A header and its payload."""

    header: PacketHeader
    payload: bytearray = field(default_factory=bytearray)

    def __post_init__(self) -> None:
        self.payload = bytearray(self.payload)

    def is_last(self) -> bool:
        """Whether this packet ends its message."""
        return self.header.status == PacketStatus.EndOfMessage

    def extend(self, data: bytes | bytearray | memoryview) -> None:
        """Append bytes to the payload."""
        self.payload.extend(data)

    def encode(self) -> bytes:
        """Header with the length filled in, followed by the payload."""
        size = len(self.payload) + HEADER_BYTES
        if size > 0xFFFF:
            raise ValueError(f"packet of {size} bytes does not fit a 16-bit length")
        return replace(self.header, length=size).encode() + bytes(self.payload)

    @classmethod
    def decode(cls, data: bytes | bytearray | memoryview) -> Packet:
        """Header from the first bytes, everything after it as payload."""
        header = PacketHeader.decode(data)
        return cls(header, bytearray(data[HEADER_BYTES:]))


class PacketCodec:
    """Frames packets in and out of a byte buffer."""

    def decode(self, buffer: bytearray) -> Packet | None:
        """Remove and return one complete packet from ``buffer``, or None."""
        if len(buffer) < HEADER_BYTES:
            return None
        header = PacketHeader.decode(buffer)
        length = header.length
        if length < HEADER_BYTES:
            raise ProtocolError(f"packet length {length} is shorter than its header")
        if len(buffer) < length:
            return None
        _log.debug("Reading a %s (%d bytes)", header.ty.name, length)
        payload = bytearray(buffer[HEADER_BYTES:length])
        del buffer[:length]
        return Packet(header, payload)

    def decode_eof(self, buffer: bytearray) -> Packet | None:
        """Like decode, but leftover bytes at end of stream are an error."""
        packet = self.decode(buffer)
        if packet is None and buffer:
            raise ProtocolError("bytes remaining on stream")
        return packet

    def encode(self, packet: Packet) -> bytes:
        return packet.encode()