# stages/_helpers.py

from datetime import date
from typing import Any

from data_detective.schemas import OffsetRange

from ..models import Located


def span(start: int, end: int) -> Located:
    """
    Build an exact location for a half-open offset range.

    Args:
        start: First offset of the span.
        end: Offset just past the span; raised to ``start`` if smaller.

    Returns:
        Located: The location.
    """
    return Located(OffsetRange(start_offset=start, end_offset=max(start, end)))


def evidence_value(value: Any) -> Any:
    """
    Make a record value safe to carry as finding evidence.

    Dates become ISO strings; every other value is kept as loaded.
    """
    if isinstance(value, date):
        return value.isoformat()
    return value


def describe(value: Any) -> str:
    return str(evidence_value(value))
