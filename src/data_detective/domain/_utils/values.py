# _utils/values.py

import json
import math
import re
from datetime import UTC, date, datetime
from typing import Literal

ValueKind = Literal["null", "number", "string", "boolean", "date", "mixed"]

_NUMERIC = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
_PLAIN_INTEGER = re.compile(r"^[+-]?\d+$")
_EDGE_QUOTE = re.compile(r"""^["']|["']$""")
_DATE_SEPARATORS = "-/. ,"

_DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)


def parse_date(value: object) -> datetime | None:
    """
    Interpret a value as a calendar date when it unambiguously is one.

    Strings must be at least eight characters long and contain a digit and a
    date separator, so short codes, plain words and bare digit runs are never
    read as dates. ISO 8601 is tried first, then a fixed list of common
    layouts. Aware results are converted to naive UTC so they compare with
    naive ones.

    Args:
        value: Any scalar; date and datetime objects are accepted as-is.

    Returns:
        datetime | None: The parsed moment, or None when it is not a date.
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if len(text) < 8 or len(text) > 40 or not any(ch.isdigit() for ch in text):
        return None
    if not any(separator in text for separator in _DATE_SEPARATORS):
        return None

    try:
        return _naive_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for layout in _DATE_FORMATS:
        try:
            return datetime.strptime(text, layout)
        except ValueError:
            continue
    return None


def is_date_value(value: object) -> bool:
    return parse_date(value) is not None


def is_number(value: object) -> bool:
    """
    Check for a real number, excluding booleans.
    """
    return isinstance(value, int | float) and not isinstance(value, bool)


def is_finite_number(value: object) -> bool:
    """
    Check for a real number that is finite as a float.

    Integers too large to convert to a float are not finite.
    """
    if not is_number(value):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def is_null(value: object) -> bool:
    return value is None or value == ""


def classify_value(value: object) -> ValueKind:
    """
    Classify a loaded value into the kinds used by field profiles.

    Args:
        value: A value taken from a record.

    Returns:
        ValueKind: null for None or "", otherwise its observed kind. Strings
            that parse as dates are "date"; containers are "mixed".
    """
    if is_null(value):
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, date):
        return "date"
    if isinstance(value, str):
        return "date" if is_date_value(value) else "string"
    return "mixed"


def coerce_csv_value(raw: str) -> object:
    """
    Convert one CSV cell into a typed value.

    Surrounding whitespace and one leading or trailing quote are removed;
    empty cells become None, "true"/"false" become booleans and numeric text
    becomes int or float.

    Args:
        raw: The cell text as split from the line.

    Returns:
        object: None, bool, int, float or the cleaned string.
    """
    text = _EDGE_QUOTE.sub("", raw.strip()).strip()

    if not text:
        return None
    if text == "true":
        return True
    if text == "false":
        return False
    if _NUMERIC.match(text):
        if _PLAIN_INTEGER.match(text):
            try:
                return int(text)
            except ValueError:
                # Beyond the interpreter's integer digit limit
                return float(text)
        return float(text)
    return text


def value_key(value: object) -> str:
    """
    Render a value as the string used for uniqueness and enum membership.

    Integral floats collapse onto their integer form so 1 and 1.0 are the same
    key; containers are rendered as canonical JSON.

    Returns:
        str: A stable textual key for the value.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict | list):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


def _naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(UTC).replace(tzinfo=None)
