# domain/_utils/test_json_parser.py

import math

import pytest

from data_detective.domain._utils import (
    JsonErrorCode,
    JsonKind,
    JsonParseError,
    closers_for,
    find_duplicate_keys,
    find_trailing_commas,
    iter_nodes,
    parse_json,
    to_python,
    unclosed_containers,
)

pytestmark = pytest.mark.unit


def _error_for(text: str, **kwargs: bool) -> JsonParseError:
    with pytest.raises(JsonParseError) as excinfo:
        parse_json(text, **kwargs)
    return excinfo.value


def test_parse_json_converts_to_python() -> None:
    """
    ARRANGE: object holding every scalar kind
    ACT:     parse_json then to_python
    ASSERT:  plain Python values are produced
    """
    text = '{"a": [1, 2.5, "x", true, null]}'

    actual = to_python(parse_json(text))

    assert actual == {"a": [1, 2.5, "x", True, None]}


def test_parse_json_records_value_spans() -> None:
    """
    ARRANGE: object with an array member
    ACT:     parse_json
    ASSERT:  member value span covers the array text
    """
    text = '{"a": [1, 2]}'

    value = parse_json(text).members[0].value

    assert text[value.start : value.end] == "[1, 2]"


def test_parse_json_trailing_comma_in_object() -> None:
    """
    ARRANGE: object with a comma before the closing brace
    ACT:     parse_json
    ASSERT:  TRAILING_COMMA anchored at the comma
    """
    actual = _error_for('{"a":1,}')

    assert (actual.code, actual.anchor, actual.closer) == (
        JsonErrorCode.TRAILING_COMMA,
        6,
        "}",
    )


def test_parse_json_trailing_comma_in_array() -> None:
    """
    ARRANGE: array with a comma before the closing bracket
    ACT:     parse_json
    ASSERT:  closer is a bracket
    """
    actual = _error_for("[1,]")

    assert actual.closer == "]"


def test_parse_json_missing_comma_in_array() -> None:
    """
    ARRANGE: array items separated by a space only
    ACT:     parse_json
    ASSERT:  MISSING_COMMA anchored after the first item
    """
    actual = _error_for("[1 2]")

    assert (actual.code, actual.anchor) == (JsonErrorCode.MISSING_COMMA, 2)


def test_parse_json_missing_comma_in_object() -> None:
    """
    ARRANGE: object members without a separating comma
    ACT:     parse_json
    ASSERT:  MISSING_COMMA
    """
    actual = _error_for('{"a":1 "b":2}')

    assert actual.code is JsonErrorCode.MISSING_COMMA


def test_parse_json_unexpected_end_reports_open_stack() -> None:
    """
    ARRANGE: document cut off inside an array inside an object
    ACT:     parse_json
    ASSERT:  UNEXPECTED_END with both containers open
    """
    actual = _error_for('{"a":[1')

    assert (actual.code, actual.open_stack) == (
        JsonErrorCode.UNEXPECTED_END,
        ("{", "["),
    )


def test_parse_json_rejects_nan_by_default() -> None:
    """
    ARRANGE: array holding NaN
    ACT:     parse_json without extended literals
    ASSERT:  NON_STANDARD_LITERAL
    """
    actual = _error_for("[NaN]")

    assert actual.code is JsonErrorCode.NON_STANDARD_LITERAL


def test_parse_json_accepts_extended_literals() -> None:
    """
    ARRANGE: array holding NaN, -Infinity and undefined
    ACT:     parse_json with extended literals
    ASSERT:  flagged node kinds are produced
    """
    root = parse_json("[NaN, -Infinity, undefined]", allow_extended_literals=True)

    actual = [item.kind for item in root.items]

    assert actual == [JsonKind.NAN, JsonKind.INFINITY, JsonKind.UNDEFINED]


def test_parse_json_negative_infinity_value() -> None:
    """
    ARRANGE: -Infinity literal
    ACT:     parse_json with extended literals
    ASSERT:  node value is negative infinity
    """
    root = parse_json("[-Infinity]", allow_extended_literals=True)

    actual = root.items[0].value

    assert math.isinf(actual) and actual < 0


def test_extended_literals_convert_to_none() -> None:
    """
    ARRANGE: NaN member
    ACT:     to_python
    ASSERT:  value becomes None
    """
    root = parse_json('{"a": NaN}', allow_extended_literals=True)

    actual = to_python(root)

    assert actual == {"a": None}


def test_parse_json_invalid_literal() -> None:
    """
    ARRANGE: misspelled literal
    ACT:     parse_json
    ASSERT:  INVALID_LITERAL carrying the word
    """
    actual = _error_for("[tru]")

    assert (actual.code, actual.token) == (JsonErrorCode.INVALID_LITERAL, "tru")


def test_parse_json_extra_data() -> None:
    """
    ARRANGE: value followed by more text
    ACT:     parse_json
    ASSERT:  EXTRA_DATA
    """
    actual = _error_for("{} x")

    assert actual.code is JsonErrorCode.EXTRA_DATA


def test_parse_json_empty_document() -> None:
    """
    ARRANGE: whitespace only
    ACT:     parse_json
    ASSERT:  EMPTY_DOCUMENT
    """
    actual = _error_for("   ")

    assert actual.code is JsonErrorCode.EMPTY_DOCUMENT


def test_parse_json_unterminated_string() -> None:
    """
    ARRANGE: string never closed
    ACT:     parse_json
    ASSERT:  UNTERMINATED_STRING at the opening quote
    """
    actual = _error_for('["abc')

    assert (actual.code, actual.offset) == (JsonErrorCode.UNTERMINATED_STRING, 1)


def test_parse_json_leading_zero() -> None:
    """
    ARRANGE: number with a leading zero
    ACT:     parse_json
    ASSERT:  INVALID_NUMBER
    """
    actual = _error_for("[01]")

    assert actual.code is JsonErrorCode.INVALID_NUMBER


def test_parse_json_unicode_escape() -> None:
    """
    ARRANGE: string with a \\u escape
    ACT:     parse_json
    ASSERT:  escape is decoded
    """
    actual = parse_json('"caf\\u00e9"').value

    assert actual == "café"


def test_parse_json_skips_byte_order_mark() -> None:
    """
    ARRANGE: document starting with a BOM
    ACT:     parse_json
    ASSERT:  parses normally
    """
    actual = to_python(parse_json('\ufeff{"a": 1}'))

    assert actual == {"a": 1}


def test_find_duplicate_keys_reports_first_repeat_per_object() -> None:
    """
    ARRANGE: key repeated twice in one object and reused in a child object
    ACT:     find_duplicate_keys
    ASSERT:  one repeat, at the second occurrence
    """
    root = parse_json('{"a":1,"a":2,"a":3,"b":{"a":1}}')

    actual = [(member.key, member.key_start) for member in find_duplicate_keys(root)]

    assert actual == [("a", 7)]


def test_find_trailing_commas_ignores_strings() -> None:
    """
    ARRANGE: one real trailing comma and one inside a string
    ACT:     find_trailing_commas
    ASSERT:  only the real comma is reported
    """
    text = '{"a":[1,],"b":"x,]"}'

    actual = find_trailing_commas(text)

    assert actual == (7,)


def test_unclosed_containers_outermost_first() -> None:
    """
    ARRANGE: object and array left open, with a bracket inside a string
    ACT:     unclosed_containers
    ASSERT:  both openers, outermost first
    """
    actual = unclosed_containers('{"a":[1, "]"')

    assert actual == ("{", "[")


def test_closers_for_reverses_stack() -> None:
    """
    ARRANGE: open object then array
    ACT:     closers_for
    ASSERT:  array closed before object
    """
    actual = closers_for(("{", "["))

    assert actual == "]}"


def test_iter_nodes_visits_every_value() -> None:
    """
    ARRANGE: nested document with five values
    ACT:     iter_nodes
    ASSERT:  every node is yielded
    """
    root = parse_json('{"a": [1, 2], "b": null}')

    actual = len(list(iter_nodes(root)))

    assert actual == 5


def test_parse_json_keeps_large_integers_exact() -> None:
    """
    ARRANGE: 400-digit integer
    ACT:     parse_json
    ASSERT:  value is the exact integer
    """
    actual = parse_json("1" + "0" * 400).value

    assert actual == 10**400


def test_parse_json_integer_beyond_digit_limit_becomes_float() -> None:
    """
    ARRANGE: 5001-digit integer
    ACT:     parse_json
    ASSERT:  number node holding an infinite float
    """
    root = parse_json("1" + "0" * 5000)

    actual = (root.kind, root.value)

    assert actual == (JsonKind.NUMBER, float("inf"))
