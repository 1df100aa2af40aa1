"""Token kinds in a response token stream."""

from __future__ import annotations

from enum import IntEnum

from tdswire.reader import ProtocolError


class TokenType(IntEnum):
    """The first byte of each token in a token stream."""

    ReturnStatus = 0x79
    ColMetaData = 0x81
    Error = 0xAA
    Info = 0xAB
    Order = 0xA9
    ColInfo = 0xA5
    ReturnValue = 0xAC
    LoginAck = 0xAD
    Row = 0xD1
    NbcRow = 0xD2
    SSPI = 0xED
    EnvChange = 0xE3
    Done = 0xFD
    DoneProc = 0xFE
    DoneInProc = 0xFF

    @classmethod
    def from_byte(cls, value: int) -> TokenType:
        """The token type for a byte, raising ProtocolError when unknown."""
        try:
            return cls(value)
        except ValueError:
            raise ProtocolError(f"invalid token type {value:x}") from None