"""Remote procedure call requests and their parameters."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag

from tdswire.batch_request import _all_headers
from tdswire.column_data import ColumnData


class RpcStatus(IntFlag):
    """Status flags of a parameter."""

    ParamByRefValue = 0x01
    ParamDefaultValue = 0x02
    ParamEncrypted = 0x08


class RpcOption(IntFlag):
    """Option flags of a request."""

    WithRecomp = 0x01
    NoMeta = 0x02
    ReuseMeta = 0x04


class RpcProcId(IntEnum):
    """Well-known system procedures that can be called by id."""

    SpCursorOpen = 2
    SpCursorFetch = 7
    SpCursorClose = 9
    SpExecuteSQL = 10
    SpPrepare = 11
    SpExecute = 12
    SpPrepExec = 13
    SpUnprepare = 15


@dataclass(frozen=True)
class RpcParam:
    """A named parameter with its flags and value."""

    name: str
    value: ColumnData
    flags: RpcStatus = RpcStatus(0)

    def encode(self) -> bytes:
        """Name as a one-byte counted UTF-16 string, flags, then the typed value."""
        raw_name = self.name.encode("utf-16-le")
        units = len(raw_name) // 2
        if units > 0xFF:
            raise ValueError(f"parameter name is too long: {units} characters")
        return bytes((units,)) + raw_name + bytes((int(self.flags),)) + self.value.encode()


@dataclass(frozen=True)
class TokenRpcRequest:
    """A call of a procedure given by id or by name."""

    proc_id: RpcProcId | str
    params: tuple[RpcParam, ...] = ()
    transaction_desc: bytes = bytes(8)
    flags: RpcOption = field(default=RpcOption(0))

    def encode(self) -> bytes:
        out = bytearray(_all_headers(self.transaction_desc))
        if isinstance(self.proc_id, RpcProcId):
            out += struct.pack("<I", 0xFFFF | int(self.proc_id) << 16)
        else:
            raw_name = self.proc_id.encode("utf-16-le")
            units = len(raw_name) // 2
            if units > 0xFFFF:
                raise ValueError(f"procedure name is too long: {units} characters")
            out += struct.pack("<H", units) + raw_name
        out += struct.pack("<H", int(self.flags))
        for param in self.params:
            out += param.encode()
        return bytes(out)