import decimal

import pytest

from tdswire.numeric import Numeric
from tdswire.reader import ByteReader, ProtocolError


def test_numeric_eq():
    assert Numeric(100501, 2) == Numeric(1005010, 3)
    assert Numeric(100501, 2) != Numeric(10050, 1)


def test_numeric_to_f64():
    assert float(Numeric(57705, 2)) == 577.05


def test_numeric_to_int_dec_part():
    n = Numeric(57705, 2)
    assert n.int_part() == 577
    assert n.dec_part() == 5


def test_calculates_precision_correctly():
    assert Numeric(57705, 2).precision() == 5


def test_str_pads_decimal_part():
    assert str(Numeric(57705, 2)) == "577.05"


def test_negative_parts_truncate_toward_zero():
    n = Numeric(-57705, 2)
    assert n.int_part() == -577
    assert n.dec_part() == -5
    assert int(n) == -577


def test_scale_limit():
    with pytest.raises(ValueError):
        Numeric(1, 38)


def test_equal_values_hash_alike():
    assert hash(Numeric(100501, 2)) == hash(Numeric(1005010, 3))


@pytest.mark.parametrize(
    "value, scale, length",
    [
        (57705, 2, 5),
        (12345678901, 2, 9),
        (10**22, 2, 13),
        (-(10**30), 3, 17),
    ],
)
def test_encode_decode_round_trip(value, scale, length):
    n = Numeric(value, scale)
    data = n.encode()
    assert data[0] == length
    assert len(data) == length + 1
    reader = ByteReader(data)
    decoded = Numeric.decode(reader, scale)
    assert decoded == n
    assert decoded.value == value
    assert reader.is_eof()


def test_encode_sign_byte():
    assert Numeric(-1, 0).encode()[1] == 0
    assert Numeric(1, 0).encode()[1] == 1


def test_decode_null():
    assert Numeric.decode(ByteReader(b"\x00"), 2) is None


def test_decode_invalid_sign():
    with pytest.raises(ProtocolError):
        Numeric.decode(ByteReader(b"\x05\x02\x00\x00\x00\x00"), 0)


def test_decode_invalid_length():
    with pytest.raises(ProtocolError):
        Numeric.decode(ByteReader(b"\x06\x01" + b"\x00" * 5), 0)


def test_decimal_round_trip():
    d = decimal.Decimal("-577.05")
    n = Numeric.from_decimal(d)
    assert n == Numeric(-57705, 2)
    assert n.to_decimal() == d


def test_from_decimal_positive_exponent():
    n = Numeric.from_decimal(decimal.Decimal("5E+2"))
    assert n.scale == 0
    assert n.value == 500


def test_from_decimal_rejects_nan():
    with pytest.raises(ValueError):
        Numeric.from_decimal(decimal.Decimal("NaN"))