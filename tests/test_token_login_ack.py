import struct

import pytest

from tdswire.login import FeatureLevel
from tdswire.reader import ByteReader, ProtocolError
from tdswire.token_login_ack import TokenLoginAck


def _login_ack(interface, tds_version, name, version):
    raw_name = name.encode("utf-16-le")
    body = (
        bytes((interface,))
        + struct.pack(">I", tds_version)
        + bytes((len(name),))
        + raw_name
        + struct.pack("<I", version)
    )
    return struct.pack("<H", len(body)) + body


def test_decode_login_ack():
    reader = ByteReader(_login_ack(1, FeatureLevel.SqlServerN, "Microsoft SQL Server", 0x0F001234))
    ack = TokenLoginAck.decode(reader)
    assert ack == TokenLoginAck(1, FeatureLevel.SqlServerN, "Microsoft SQL Server", 0x0F001234)
    assert reader.is_eof()


def test_version_is_big_endian():
    reader = ByteReader(_login_ack(0, FeatureLevel.SqlServer2005, "srv", 1))
    assert TokenLoginAck.decode(reader).tds_version is FeatureLevel.SqlServer2005


def test_invalid_version():
    reader = ByteReader(_login_ack(1, 0x12345678, "srv", 1))
    with pytest.raises(ProtocolError, match="Invalid TDS version"):
        TokenLoginAck.decode(reader)


def test_truncated_token():
    data = _login_ack(1, FeatureLevel.SqlServerN, "srv", 1)[:-2]
    with pytest.raises(ProtocolError):
        TokenLoginAck.decode(ByteReader(data))