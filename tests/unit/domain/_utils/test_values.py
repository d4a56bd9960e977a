# domain/_utils/test_values.py

from datetime import date, datetime

import pytest

from data_detective.domain._utils import (
    classify_value,
    coerce_csv_value,
    is_finite_number,
    is_number,
    parse_date,
    value_key,
)

pytestmark = pytest.mark.unit


def test_parse_date_iso_date() -> None:
    """
    ARRANGE: ISO 8601 date string
    ACT:     parse_date
    ASSERT:  midnight of that day
    """
    actual = parse_date("2024-01-15")

    assert actual == datetime(2024, 1, 15)


def test_parse_date_aware_value_becomes_naive_utc() -> None:
    """
    ARRANGE: timestamp with a +02:00 offset
    ACT:     parse_date
    ASSERT:  converted to naive UTC
    """
    actual = parse_date("2024-01-15T10:00:00+02:00")

    assert actual == datetime(2024, 1, 15, 8, 0, 0)


def test_parse_date_zulu_suffix() -> None:
    """
    ARRANGE: timestamp ending in Z
    ACT:     parse_date
    ASSERT:  parsed as UTC
    """
    actual = parse_date("2024-01-15T10:00:00Z")

    assert actual == datetime(2024, 1, 15, 10, 0, 0)


def test_parse_date_us_layout() -> None:
    """
    ARRANGE: month/day/year string
    ACT:     parse_date
    ASSERT:  parsed with the US layout
    """
    actual = parse_date("01/15/2024")

    assert actual == datetime(2024, 1, 15)


def test_parse_date_month_name() -> None:
    """
    ARRANGE: abbreviated month name layout
    ACT:     parse_date
    ASSERT:  parsed
    """
    actual = parse_date("Jan 05, 2024")

    assert actual == datetime(2024, 1, 5)


def test_parse_date_rejects_digit_run() -> None:
    """
    ARRANGE: eight digits without a separator
    ACT:     parse_date
    ASSERT:  not a date
    """
    actual = parse_date("12345678")

    assert actual is None


def test_parse_date_rejects_numbers() -> None:
    """
    ARRANGE: integer value
    ACT:     parse_date
    ASSERT:  not a date
    """
    actual = parse_date(20240115)

    assert actual is None


def test_parse_date_accepts_date_objects() -> None:
    """
    ARRANGE: date object as loaded from YAML
    ACT:     parse_date
    ASSERT:  promoted to datetime
    """
    actual = parse_date(date(2020, 1, 2))

    assert actual == datetime(2020, 1, 2)


def test_is_number_excludes_booleans() -> None:
    """
    ARRANGE: boolean and float
    ACT:     is_number
    ASSERT:  only the float is a number
    """
    actual = (is_number(True), is_number(1.5))

    assert actual == (False, True)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "null"),
        ("", "null"),
        (True, "boolean"),
        (3, "number"),
        ("2024-01-15", "date"),
        ("hello", "string"),
        ([1], "mixed"),
    ],
)
def test_classify_value(value: object, expected: str) -> None:
    """
    ARRANGE: value of each kind
    ACT:     classify_value
    ASSERT:  expected kind
    """
    actual = classify_value(value)

    assert actual == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (" 42 ", 42),
        ("3.5", 3.5),
        ("1e3", 1000.0),
        ("", None),
        ("true", True),
        ("false", False),
        ('"x"', "x"),
        ("abc", "abc"),
    ],
)
def test_coerce_csv_value(raw: str, expected: object) -> None:
    """
    ARRANGE: raw cell text
    ACT:     coerce_csv_value
    ASSERT:  typed value
    """
    actual = coerce_csv_value(raw)

    assert actual == expected and type(actual) is type(expected)


def test_value_key_collapses_integral_floats() -> None:
    """
    ARRANGE: integral float
    ACT:     value_key
    ASSERT:  same key as the integer
    """
    actual = value_key(1.0)

    assert actual == value_key(1)


def test_value_key_renders_booleans_lowercase() -> None:
    """
    ARRANGE: boolean
    ACT:     value_key
    ASSERT:  lowercase text
    """
    actual = value_key(True)

    assert actual == "true"


def test_value_key_sorts_mapping_keys() -> None:
    """
    ARRANGE: mapping with unsorted keys
    ACT:     value_key
    ASSERT:  canonical JSON
    """
    actual = value_key({"b": 1, "a": 2})

    assert actual == '{"a": 2, "b": 1}'


def test_is_finite_number_rejects_integers_beyond_float_range() -> None:
    """
    ARRANGE: 400-digit integer
    ACT:     is_finite_number
    ASSERT:  not finite
    """
    actual = is_finite_number(10**400)

    assert actual is False


def test_is_finite_number_rejects_non_finite_floats() -> None:
    """
    ARRANGE: NaN and infinity
    ACT:     is_finite_number
    ASSERT:  neither is finite
    """
    actual = [is_finite_number(float("nan")), is_finite_number(float("inf"))]

    assert actual == [False, False]


def test_is_finite_number_accepts_ordinary_values() -> None:
    """
    ARRANGE: integer and float
    ACT:     is_finite_number
    ASSERT:  both are finite
    """
    actual = [is_finite_number(3), is_finite_number(-2.5)]

    assert actual == [True, True]


def test_coerce_csv_value_integer_beyond_digit_limit() -> None:
    """
    ARRANGE: 5001-digit integer cell
    ACT:     coerce_csv_value
    ASSERT:  falls back to an infinite float
    """
    actual = coerce_csv_value("1" + "0" * 5000)

    assert actual == float("inf")
