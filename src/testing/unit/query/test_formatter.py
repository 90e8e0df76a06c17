import datetime

import pytest

from entitysearch import FieldType, FormatError, format_value, parse_value


@pytest.mark.parametrize(
    "value, field_type, expected",
    [
        (42, FieldType.INTEGER, "42"),
        (-7, FieldType.INTEGER, "-7"),
        (0, FieldType.INTEGER, "0"),
        (1.5, FieldType.FLOAT, "1.5"),
        (3, FieldType.FLOAT, "3"),
        (0.0, FieldType.FLOAT, "0.0"),
        (1e-05, FieldType.FLOAT, "0.00001"),
        (1e16, FieldType.FLOAT, "10000000000000000"),
        (-2.5e-8, FieldType.FLOAT, "-0.000000025"),
        (True, FieldType.BOOLEAN, "true"),
        (False, FieldType.BOOLEAN, "false"),
        ("a@b.com", FieldType.STRING, "'a@b.com'"),
        ("", FieldType.STRING, "''"),
    ],
)
def test_format_canonical_literals(value, field_type, expected):
    assert format_value(value, field_type) == expected


def test_format_accepts_type_names():
    assert format_value(5, "integer") == "5"
    assert format_value("x", "string") == "'x'"


def test_format_dates():
    assert (
        format_value(datetime.datetime(2018, 1, 31, 12, 5, 9), FieldType.DATE)
        == "dt '2018-01-31 12:05:09'"
    )
    assert format_value(datetime.date(2018, 1, 31), FieldType.DATE) == "dt '2018-01-31'"


def test_format_dates_pad_short_years():
    assert format_value(datetime.date(999, 1, 1), FieldType.DATE) == "dt '0999-01-01'"
    assert (
        format_value(datetime.datetime(999, 1, 1, 8, 0, 0), FieldType.DATE)
        == "dt '0999-01-01 08:00:00'"
    )


def test_format_aware_datetime_fails():
    value = datetime.datetime(2018, 1, 31, 12, tzinfo=datetime.timezone.utc)
    with pytest.raises(FormatError, match="Timezone-aware"):
        format_value(value, FieldType.DATE)


def test_format_sub_second_datetime_fails():
    value = datetime.datetime(2018, 1, 31, 12, 0, 0, 750000)
    with pytest.raises(FormatError, match="more precise"):
        format_value(value, FieldType.DATE)


def test_format_string_with_single_quote_switches_delimiter():
    """A value holding a single quote must not terminate the literal early."""
    assert format_value("O'Brien", FieldType.STRING) == "\"O'Brien\""
    assert format_value("x' or 1=1 or 'y", FieldType.STRING) == "\"x' or 1=1 or 'y\""


def test_format_string_with_double_quote():
    assert format_value('say "hi"', FieldType.STRING) == "'say \"hi\"'"


def test_format_string_with_both_quotes_fails():
    with pytest.raises(FormatError, match="both quote characters"):
        format_value("it's \"quoted\"", FieldType.STRING)


def test_format_none_fails():
    for field_type in FieldType:
        with pytest.raises(FormatError):
            format_value(None, field_type)


@pytest.mark.parametrize(
    "value, field_type",
    [
        ("42", FieldType.INTEGER),
        (True, FieldType.INTEGER),
        (1.5, FieldType.INTEGER),
        (False, FieldType.FLOAT),
        ("1.5", FieldType.FLOAT),
        (1, FieldType.BOOLEAN),
        ("true", FieldType.BOOLEAN),
        (42, FieldType.STRING),
        ("2018-01-31", FieldType.DATE),
        (1517400000, FieldType.DATE),
    ],
)
def test_format_type_mismatch_fails(value, field_type):
    with pytest.raises(FormatError, match="is not a valid"):
        format_value(value, field_type)


def test_format_non_finite_float_fails():
    with pytest.raises(FormatError):
        format_value(float("nan"), FieldType.FLOAT)
    with pytest.raises(FormatError):
        format_value(float("inf"), FieldType.FLOAT)


def test_format_unknown_type_fails():
    with pytest.raises(FormatError, match="Unsupported field type"):
        format_value(1, "blob")


def test_format_error_is_builtin_compatible():
    with pytest.raises(TypeError):
        format_value("1", FieldType.INTEGER)
    with pytest.raises(ValueError):
        format_value("1", FieldType.INTEGER)


def test_parse_values():
    assert parse_value(" 12 ", FieldType.INTEGER) == 12
    assert parse_value("2.5", FieldType.FLOAT) == 2.5
    assert parse_value("Yes", FieldType.BOOLEAN) is True
    assert parse_value("0", FieldType.BOOLEAN) is False
    assert parse_value("  padded  ", FieldType.STRING) == "padded"
    assert parse_value("2018-01-31", FieldType.DATE) == datetime.date(2018, 1, 31)
    assert parse_value("20180131", FieldType.DATE) == datetime.date(2018, 1, 31)
    assert parse_value("2018-01-31 12:05:09", FieldType.DATE) == datetime.datetime(
        2018, 1, 31, 12, 5, 9
    )


def test_parse_blank_is_absent():
    for field_type in FieldType:
        assert parse_value(None, field_type) is None
        assert parse_value("   ", field_type) is None


@pytest.mark.parametrize(
    "text, field_type",
    [
        ("twelve", FieldType.INTEGER),
        ("1.5", FieldType.INTEGER),
        ("abc", FieldType.FLOAT),
        ("maybe", FieldType.BOOLEAN),
        ("31/01/2018", FieldType.DATE),
    ],
)
def test_parse_invalid_text_fails(text, field_type):
    with pytest.raises(FormatError, match="Cannot read"):
        parse_value(text, field_type)


def test_parsed_values_are_formattable():
    assert format_value(parse_value("7", FieldType.INTEGER), FieldType.INTEGER) == "7"
    assert format_value(parse_value("false", FieldType.BOOLEAN), FieldType.BOOLEAN) == "false"
    assert (
        format_value(parse_value("2018-01-31", FieldType.DATE), FieldType.DATE)
        == "dt '2018-01-31'"
    )
    assert (
        format_value(parse_value("20180131", FieldType.DATE), FieldType.DATE)
        == "dt '2018-01-31'"
    )
    assert format_value(parse_value("0.00001", FieldType.FLOAT), FieldType.FLOAT) == "0.00001"


def test_parsed_precise_dates_are_not_truncated():
    value = parse_value("2018-01-31T12:00:00.750+02:00", FieldType.DATE)
    with pytest.raises(FormatError):
        format_value(value, FieldType.DATE)
