"""The DONE, DONEPROC and DONEINPROC tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag

from tdswire.login import FeatureLevel
from tdswire.reader import ByteReader, ProtocolError


class DoneStatus(IntFlag):
    """Status bits of a completion token."""

    More = 0x1
    Error = 0x2
    Inexact = 0x4
    Count = 0x10
    Attention = 0x20
    RpcInBatch = 0x80
    SrvError = 0x100


_KNOWN_STATUS = sum(flag.value for flag in DoneStatus)


def _describe(status: DoneStatus) -> str:
    names = [flag.name for flag in DoneStatus if flag & status]
    return "|".join(names) if names else "(empty)"


@dataclass(frozen=True)
class TokenDone:
    """Completion of a statement or procedure."""

    status: DoneStatus
    cur_cmd: int
    done_rows: int

    @classmethod
    def decode(
        cls, reader: ByteReader, version: FeatureLevel = FeatureLevel.SqlServerN
    ) -> TokenDone:
        """Read the token; the row count width depends on the protocol version."""
        raw_status = reader.read_u16_le()
        if raw_status & ~_KNOWN_STATUS:
            raise ProtocolError("done(variant): invalid status")
        cur_cmd = reader.read_u16_le()
        if FeatureLevel(version).done_row_count_bytes() == 8:
            rows = reader.read_u64_le()
        else:
            rows = reader.read_u32_le()
        return cls(DoneStatus(raw_status), cur_cmd, rows)

    def has_more(self) -> bool:
        """Whether more results follow."""
        return DoneStatus.More in self.status

    def is_final(self) -> bool:
        """Whether no status bit is set."""
        return not self.status

    def __str__(self) -> str:
        status = _describe(self.status)
        if self.done_rows == 0:
            return f"Done with status {status}"
        if self.done_rows == 1:
            return f"Done with status {status} (1 row left)"
        return f"Done with status {status} ({self.done_rows} rows left)"