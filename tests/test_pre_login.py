import struct

import pytest

from tdswire.pre_login import EncryptionLevel, PreloginMessage
from tdswire.reader import ProtocolError


def test_option_table_ends_with_terminator():
    encoded = PreloginMessage().encode()
    assert encoded[20] == 0xFF
    assert encoded[0] == 0x00


def test_round_trip():
    message = PreloginMessage(version=0x0F00_0000, sub_build=4, encryption=EncryptionLevel.On)
    decoded = PreloginMessage.decode(message.encode())
    assert decoded.version == message.version
    assert decoded.sub_build == message.sub_build
    assert decoded.encryption == EncryptionLevel.On


@pytest.mark.parametrize(
    "expected, server, result",
    [
        (EncryptionLevel.NotSupported, EncryptionLevel.NotSupported, EncryptionLevel.NotSupported),
        (EncryptionLevel.Off, EncryptionLevel.Off, EncryptionLevel.Off),
        (EncryptionLevel.Off, EncryptionLevel.On, EncryptionLevel.On),
        (EncryptionLevel.On, EncryptionLevel.On, EncryptionLevel.On),
        (EncryptionLevel.Required, EncryptionLevel.Off, EncryptionLevel.On),
    ],
)
def test_negotiation(expected, server, result):
    assert PreloginMessage(encryption=server).negotiated_encryption(expected) == result


@pytest.mark.parametrize("server", [EncryptionLevel.Off, EncryptionLevel.NotSupported])
def test_negotiation_refused(server):
    with pytest.raises(ProtocolError):
        PreloginMessage(encryption=server).negotiated_encryption(EncryptionLevel.On)


def test_invalid_encryption_value():
    data = struct.pack(">BHH", 0x01, 6, 1) + b"\xff" + b"\x09"
    with pytest.raises(ProtocolError):
        PreloginMessage.decode(data)


def test_unsupported_token():
    data = struct.pack(">BHH", 0x07, 6, 0) + b"\xff"
    with pytest.raises(ProtocolError):
        PreloginMessage.decode(data)


def test_missing_terminator():
    with pytest.raises(ProtocolError):
        PreloginMessage.decode(struct.pack(">BHH", 0x03, 5, 0))