"""The SQL batch request carrying query text."""

from __future__ import annotations

import struct
from dataclasses import dataclass

ALL_HEADERS_LEN_TX = 22
ALL_HEADER_TRANSACTION_DESCRIPTOR = 2


def _all_headers(transaction_descriptor: bytes) -> bytes:
    if len(transaction_descriptor) != 8:
        raise ValueError(
            f"transaction descriptor must be 8 bytes, got {len(transaction_descriptor)}"
        )
    return (
        struct.pack(
            "<IIH",
            ALL_HEADERS_LEN_TX,
            ALL_HEADERS_LEN_TX - 4,
            ALL_HEADER_TRANSACTION_DESCRIPTOR,
        )
        + bytes(transaction_descriptor)
        + struct.pack("<I", 1)
    )


@dataclass(frozen=True)
class BatchRequest:
    """One or more statements sent as a single batch."""

    queries: str
    transaction_descriptor: bytes = bytes(8)

    def encode(self) -> bytes:
        """Transaction headers followed by the query text in UTF-16."""
        return _all_headers(self.transaction_descriptor) + self.queries.encode("utf-16-le")