import struct

import pytest

from tdswire.batch_request import (
    ALL_HEADER_TRANSACTION_DESCRIPTOR,
    ALL_HEADERS_LEN_TX,
    BatchRequest,
)


def test_layout():
    query = "SELECT 1"
    encoded = BatchRequest(query).encode()
    assert encoded[ALL_HEADERS_LEN_TX:] == query.encode("utf-16-le")
    total, header_len, header_ty = struct.unpack_from("<IIH", encoded)
    assert total == ALL_HEADERS_LEN_TX
    assert header_len == ALL_HEADERS_LEN_TX - 4
    assert header_ty == ALL_HEADER_TRANSACTION_DESCRIPTOR
    assert encoded[10:18] == bytes(8)
    assert struct.unpack_from("<I", encoded, 18)[0] == 1


def test_descriptor_is_written():
    descriptor = bytes(range(1, 9))
    encoded = BatchRequest("x", descriptor).encode()
    assert encoded[10:18] == descriptor


def test_surrogate_pairs():
    encoded = BatchRequest("𝄞").encode()
    assert len(encoded) == ALL_HEADERS_LEN_TX + 4
    assert encoded[ALL_HEADERS_LEN_TX:].decode("utf-16-le") == "𝄞"


def test_empty_query():
    assert len(BatchRequest("").encode()) == ALL_HEADERS_LEN_TX


def test_bad_descriptor_length():
    with pytest.raises(ValueError):
        BatchRequest("SELECT 1", b"\x00" * 4).encode()