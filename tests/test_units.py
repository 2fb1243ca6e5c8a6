import pytest

from hpcquota.errors import ParseError
from hpcquota.record import ScaledValue
from hpcquota.units import convert_to_unit, format_scaled, parse_scaled, \
                           to_bytes, UNITS


def test_parse_scaled_with_unit():
    assert parse_scaled("356.4M") == ScaledValue(356.4, "M")
    assert parse_scaled("23.09T") == ScaledValue(23.09, "T")


def test_parse_scaled_without_unit_is_a_raw_count():
    value = parse_scaled("165144313856")
    assert value == ScaledValue(165144313856, "")
    assert isinstance(value.magnitude, int)


def test_parse_scaled_thousands_separators():
    assert parse_scaled("1,048,947") == ScaledValue(1048947, "")
    assert parse_scaled("36,517.5G") == ScaledValue(36517.5, "G")


def test_parse_scaled_reads_quota_kibibytes():
    assert parse_scaled("1024K") == ScaledValue(1024, "k")


@pytest.mark.parametrize("text", ["", "abc", "-", "1.2X", "12,34", "M"])
def test_parse_scaled_rejects_garbage(text):
    with pytest.raises(ParseError):
        parse_scaled(text)


def test_format_scaled_precision():
    assert format_scaled(ScaledValue(356.4, "M")) == "356.4M"
    assert format_scaled(ScaledValue(356.4, "M"), precision = 2) == "356.40M"
    assert format_scaled(ScaledValue(7159, "")) == "7159.0"


def test_format_scaled_promotes_long_numbers():
    # 2048000000 -> 2000000k -> 1953.125M
    assert format_scaled(ScaledValue(2048000000, "")) == "1953.1M"
    assert format_scaled(ScaledValue(99999, "")) == "99999.0"
    assert format_scaled(ScaledValue(100000, "")) == "97.7k"


def test_format_scaled_integer_part_has_at_most_five_digits():
    for magnitude in (1, 12345, 123456, 10 ** 9, 10 ** 12, 3 * 10 ** 15):
        text = format_scaled(ScaledValue(magnitude, ""))
        assert len(text.rstrip("kMGTP").split(".")[0]) <= 5


def test_format_scaled_stops_at_peta():
    assert format_scaled(ScaledValue(200000, "P")) == "200000.0P"


def test_format_scaled_zero():
    assert format_scaled(ScaledValue(0, "")) == "0.0"
    assert format_scaled(ScaledValue(0, "G")) == "0.0G"


def test_format_scaled_is_idempotent_below_threshold():
    value = ScaledValue(1953.1, "M")
    assert format_scaled(parse_scaled(format_scaled(value))) == \
           format_scaled(value)


def test_convert_to_tebibytes():
    assert convert_to_unit(ScaledValue(2048, "G"), "T") == \
           ScaledValue(2.0, "T")
    assert format_scaled(convert_to_unit(ScaledValue(512, "M"), "T")) == \
           "0.0T"


def test_convert_round_trip():
    for value in (ScaledValue(356.4, "M"), ScaledValue(23.09, "T"),
                  ScaledValue(165144313856, ""), ScaledValue(1, "k")):
        for unit in UNITS:
            back = convert_to_unit(convert_to_unit(value, unit), value.unit)
            assert back.unit == value.unit
            assert back.magnitude == pytest.approx(value.magnitude, abs = 0.1)


def test_to_bytes():
    assert to_bytes(ScaledValue(1, "k")) == 1024
    assert to_bytes(ScaledValue(2, "G")) == 2 * 1024 ** 3
