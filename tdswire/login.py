"""The LOGIN7 message and the feature levels and flags it carries."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag


class FeatureLevel(IntEnum):
    """Protocol versions a client or server may speak."""

    SqlServerV7 = 0x70000000
    SqlServer2000 = 0x71000000
    SqlServer2000Sp1 = 0x71000001
    SqlServer2005 = 0x72090002
    SqlServer2008 = 0x730A0003
    SqlServer2008R2 = 0x730B0003
    SqlServerN = 0x74000004

    def done_row_count_bytes(self) -> int:
        """Width of the row count in DONE tokens for this version."""
        if (self & 0xFF) >= (FeatureLevel.SqlServer2005 & 0xFF):
            return 8
        return 4


class OptionFlag1(IntFlag):
    BigEndian = 0x01
    CharsetEBDDIC = 0x02
    FloatVax = 0x04
    FloatND5000 = 0x08
    BcpDumploadOff = 0x10
    UseDbNotify = 0x20
    InitDbFatal = 0x40
    LangChangeWarn = 0x80


class OptionFlag2(IntFlag):
    InitLangFatal = 0x01
    OdbcDriver = 0x02
    TransBoundary = 0x04
    CacheConnect = 0x08
    UserTypeServer = 0x10
    UserTypeRemUser = 0x20
    UserTypeSqlRepl = 0x40
    IntegratedSecurity = 0x80


class OptionFlag3(IntFlag):
    RequestChangePassword = 0x01
    BinaryXML = 0x02
    SpawnUserInstance = 0x04
    UnknownCollationHandling = 0x08
    ExtensionUsed = 0x10


class LoginTypeFlag(IntFlag):
    UseTSQL = 0x01
    UseOLEDB = 0x10
    ReadOnlyIntent = 0x20


_FIXED = struct.Struct("<IIIIIIBBBBiI")
# Nine offset/length pairs, the six-byte client id, three more pairs and cbSSPILong.
_TABLE_LEN = 9 * 4 + 6 + 3 * 4 + 4
_DATA_START = _FIXED.size + _TABLE_LEN
_CLIENT_ID = 42
_FEATURE_EXT_TERMINATOR = 0xFF


def _scramble(byte: int) -> int:
    return (((byte << 4) & 0xF0) | ((byte >> 4) & 0x0F)) ^ 0xA5


@dataclass
class LoginMessage:
    """The login packet body sent after pre-login."""

    tds_version: FeatureLevel = FeatureLevel.SqlServerN
    packet_size: int = 4096
    client_prog_ver: int = 0
    client_pid: int = 0
    connection_id: int = 0
    option_flags_1: OptionFlag1 = OptionFlag1.UseDbNotify | OptionFlag1.InitDbFatal
    option_flags_2: OptionFlag2 = OptionFlag2.InitLangFatal | OptionFlag2.OdbcDriver
    type_flags: LoginTypeFlag = LoginTypeFlag(0)
    option_flags_3: OptionFlag3 = OptionFlag3.UnknownCollationHandling
    client_timezone: int = 0
    client_lcid: int = 0
    hostname: str = ""
    username: str = ""
    password: str = ""
    app_name: str = "tdswire"
    server_name: str = ""
    db_name: str = ""
    integrated_security: bytes | None = None

    def set_integrated_security(self, token: bytes | None) -> None:
        """Attach an SSPI token, or remove it with None, toggling the flag."""
        if token is not None:
            self.option_flags_2 |= OptionFlag2.IntegratedSecurity
            self.integrated_security = bytes(token)
        else:
            self.option_flags_2 &= ~OptionFlag2.IntegratedSecurity
            self.integrated_security = None

    def encode(self) -> bytes:
        table = bytearray()
        data = bytearray()

        def put_offset_length(length: int) -> None:
            offset = _DATA_START + len(data)
            if offset > 0xFFFF or length > 0xFFFF:
                raise ValueError("login message variable data is too long")
            table.extend(struct.pack("<HH", offset, length))

        def put_text(text: str, scramble: bool = False) -> None:
            raw = text.encode("utf-16-le")
            if scramble:
                raw = bytes(_scramble(b) for b in raw)
            put_offset_length(len(raw) // 2)
            data.extend(raw)

        put_text(self.hostname)
        put_text(self.username)
        put_text(self.password, scramble=True)
        put_text(self.app_name)
        put_text(self.server_name)
        put_text("")  # extension
        put_text("")  # client interface name
        put_text("")  # language
        put_text(self.db_name)

        table.extend(struct.pack("<IH", 0, _CLIENT_ID))

        sspi = self.integrated_security or b""
        put_offset_length(len(sspi))
        data.extend(sspi)

        put_text("")  # attach db file
        put_text("")  # change password
        table.extend(struct.pack("<I", 0))  # cbSSPILong

        body = (
            _FIXED.pack(
                0,
                self.tds_version,
                self.packet_size,
                self.client_prog_ver,
                self.client_pid,
                self.connection_id,
                int(self.option_flags_1),
                int(self.option_flags_2),
                int(self.type_flags),
                int(self.option_flags_3),
                self.client_timezone,
                self.client_lcid,
            )
            + bytes(table)
            + bytes(data)
            + bytes((_FEATURE_EXT_TERMINATOR,))
        )
        return struct.pack("<I", len(body)) + body[4:]