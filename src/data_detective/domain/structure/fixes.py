# structure/fixes.py

import json
import logging
from collections.abc import Callable

from data_detective.domain._utils import (
    JsonParseError,
    closers_for,
    count_csv_columns,
    find_duplicate_keys,
    parse_json,
    to_python,
    unclosed_containers,
)
from data_detective.domain.source_map import SourceMapper
from data_detective.schemas import StructureIssue

logger = logging.getLogger(__name__)


def apply_fix(content: str, issue: StructureIssue) -> str:
    """
    Apply the repair for a single auto-fixable issue.

    Each repair touches one position, located from the issue's line and
    column in the content as it stands now. Issues without a repair, or whose
    target no longer matches, leave the content unchanged.

    Args:
        content: The current document text.
        issue: The issue to repair.

    Returns:
        str: The repaired text.
    """
    fix = _FIXES.get(issue.pattern)
    if fix is None or not issue.can_auto_fix:
        return content
    return fix(content, issue)


def remove_comma(content: str, issue: StructureIssue) -> str:
    """
    Delete the comma at the issue position.
    """
    offset = _offset_of(content, issue)
    if offset is None or content[offset : offset + 1] != ",":
        return content
    return content[:offset] + content[offset + 1 :]


def insert_comma(content: str, issue: StructureIssue) -> str:
    """
    Insert a comma at the issue position, right after the previous value.
    """
    offset = _offset_of(content, issue)
    if offset is None:
        return content
    return content[:offset] + "," + content[offset:]


def append_closers(content: str, _: StructureIssue) -> str:
    """
    Close every bracket still open at the end of the document.

    Trailing whitespace stays after the added closers.
    """
    closers = closers_for(unclosed_containers(content))
    if not closers:
        return content
    body = content.rstrip()
    return body + closers + content[len(body) :]


def pad_csv_row(content: str, issue: StructureIssue) -> str:
    """
    Append empty fields to a CSV row that is shorter than the header.
    """
    mapper = SourceMapper(content)
    header = next((line for line in mapper.iter_lines() if line.text.strip()), None)
    row = mapper.get_line(issue.line)
    if header is None or row is None:
        return content

    missing = count_csv_columns(header.text) - count_csv_columns(row.text)
    if missing <= 0:
        return content
    return content[: row.end] + "," * missing + content[row.end :]


def close_csv_quote(content: str, issue: StructureIssue) -> str:
    """
    Close an unterminated quoted field at the end of its line.
    """
    row = SourceMapper(content).get_line(issue.line)
    if row is None:
        return content
    return content[: row.end] + '"' + content[row.end :]


def reformat_json(content: str, _: StructureIssue) -> str:
    """
    Pretty-print a JSON document with two-space indentation.

    The document is re-parsed first. Invalid JSON is refused, as is JSON with
    duplicate keys, whose earlier values a rewrite would silently drop.

    Returns:
        str: The reformatted text, or the input when reformatting is refused.
    """
    try:
        root = parse_json(content)
    except JsonParseError as error:
        logger.warning("Refusing to reformat invalid JSON: %s", error)
        return content

    duplicates = find_duplicate_keys(root)
    if duplicates:
        logger.warning(
            "Refusing to reformat JSON with %d duplicate key(s)",
            len(duplicates),
        )
        return content

    trailing = "\n" if content.endswith("\n") else ""
    return json.dumps(to_python(root), indent=2, ensure_ascii=False) + trailing


def _offset_of(content: str, issue: StructureIssue) -> int | None:
    mapper = SourceMapper(content)
    if mapper.get_line(issue.line) is None:
        return None
    return mapper.position_to_offset(issue.line, issue.column)


_FIXES: dict[str, Callable[[str, StructureIssue], str]] = {
    "TRAILING_COMMA": remove_comma,
    "MISPLACED_COMMA": remove_comma,
    "MISSING_COMMA": insert_comma,
    "UNEXPECTED_END": append_closers,
    "CSV_COLUMN_MISMATCH": pad_csv_row,
    "CSV_UNCLOSED_QUOTE": close_csv_quote,
    "INCONSISTENT_INDENTATION": reformat_json,
}
