"""Tests for duration token parsing."""

import pytest

from waitlimit import (
    CenturyScale,
    Duration,
    ParseError,
    SubSecond,
    Whole,
    parse_token,
    parse_tokens,
    scale_fraction,
    unit_table,
)


@pytest.fixture
def table():
    return unit_table()


def test_bare_number_is_seconds(table):
    assert parse_token("90", table) == Whole(seconds=90)
    assert parse_token("2.5", table) == Whole(seconds=2, nanos=500_000_000)


def test_fractional_hours_carry_into_seconds(table):
    total = parse_tokens(["1.5h"], table)

    assert total.duration == Duration(seconds=5400, nanoseconds=0)
    assert total.centuries == 0


def test_nine_fraction_digits_map_to_nanoseconds(table):
    assert parse_token("2.123456789s", table) == Whole(
        seconds=2, nanos=123_456_789
    )


def test_fraction_without_integer_part(table):
    assert parse_tokens([".5m"], table).duration == Duration(seconds=30)


def test_long_fraction_is_truncated(table):
    assert parse_token("1.1234567891234", table) == Whole(
        seconds=1, nanos=123_456_789
    )


def test_scale_fraction():
    assert scale_fraction("") == 0
    assert scale_fraction("5") == 500_000_000
    assert scale_fraction("000000001") == 1
    assert scale_fraction("0000000001234") == 0
    assert scale_fraction("9999999999") == 999_999_999
    assert scale_fraction("25", width=3) == 250


def test_scale_fraction_rejects_non_digits():
    with pytest.raises(ValueError, match="decimal digits"):
        scale_fraction("12a")


def test_suffix_is_case_insensitive(table):
    assert parse_token("1H", table) == parse_token("1h", table)
    assert parse_token("3Days", table) == Whole(seconds=3 * 86400)


def test_centuries_are_counted_separately(table):
    assert parse_token("2c", table) == CenturyScale(count=2)

    total = parse_tokens(["2c"], table)

    assert total.centuries == 2
    assert total.duration == Duration()


def test_millennium_counts_ten_centuries(table):
    assert parse_token("1k", table) == CenturyScale(count=10)


def test_fractional_century_goes_to_seconds(table):
    total = parse_tokens(["1.5c"], table)

    assert total.centuries == 1
    assert total.duration == Duration(seconds=1_555_200_000)


def test_subsecond_units_skip_fraction_processing(table):
    assert parse_token("250ms", table) == SubSecond(nanos=250_000_000)
    assert parse_token("3us", table) == SubSecond(nanos=3_000)
    assert parse_token("7n", table) == SubSecond(nanos=7)
    assert parse_token("1.9ms", table) == SubSecond(nanos=1_000_000)


def test_sidereal_year_keeps_nanoseconds():
    sidereal = unit_table("sidereal")

    assert parse_token("1y", sidereal) == Whole(
        seconds=31_558_149, nanos=763_545_600
    )
    assert parse_tokens(["0.5y"], sidereal).duration == Duration(
        seconds=15_779_074, nanoseconds=881_772_800
    )


def test_unknown_suffix_is_a_parse_error(table):
    with pytest.raises(ParseError, match="unknown unit suffix 'z'") as info:
        parse_token("5z", table)

    assert info.value.token == "5z"
    assert isinstance(info.value, ValueError)


@pytest.mark.parametrize("token", ["", "h", ".", "1.2.3", "abc", "1h2"])
def test_malformed_tokens_are_parse_errors(table, token):
    with pytest.raises(ParseError):
        parse_token(token, table)


def test_token_order_does_not_matter(table):
    tokens = ["1h", "30m", "0.75s", "2c", "500ms"]

    assert parse_tokens(tokens, table) == parse_tokens(reversed(tokens), table)


def test_many_fractions_carry_repeatedly(table):
    total = parse_tokens(["0.9"] * 5, table)

    assert total.duration == Duration(seconds=4, nanoseconds=500_000_000)


def test_parse_stops_at_first_bad_token(table):
    with pytest.raises(ParseError, match="'1q'"):
        parse_tokens(["1h", "1q", "2z"], table)
