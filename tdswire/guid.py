"""Conversion between UUID and GUID byte order."""

from __future__ import annotations


def reorder_bytes(data: bytes | bytearray) -> bytes:
    """Swap the first three groups between big and little endian.

    UUIDs keep network order in their first three groups, GUIDs keep native
    little-endian order. The operation is its own inverse.
    """
    if len(data) != 16:
        raise ValueError(f"a GUID is 16 bytes long, got {len(data)}")
    out = bytearray(data)
    out[0:4] = out[0:4][::-1]
    out[4:6] = out[4:6][::-1]
    out[6:8] = out[6:8][::-1]
    return bytes(out)