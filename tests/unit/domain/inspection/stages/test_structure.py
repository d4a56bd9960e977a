# domain/inspection/stages/test_structure.py

import pytest

from data_detective.domain.inspection import (
    DocumentError,
    default_settings,
    load_document,
)
from data_detective.domain.inspection.context import AnalysisContext
from data_detective.domain.inspection.stages import check_structure
from data_detective.domain.source_map import SourceMapper

pytestmark = pytest.mark.unit


def _context(content: str, file_type: str) -> AnalysisContext:
    settings = default_settings()
    document, load_error = None, None
    try:
        document = load_document(content, file_type, settings)
    except DocumentError as error:
        load_error = error
    return AnalysisContext(
        content=content,
        file_name="test",
        file_type=file_type,
        settings=settings,
        mapper=SourceMapper(content),
        document=document,
        load_error=load_error,
    )


def test_invalid_json_is_structure_error() -> None:
    """
    ARRANGE: JSON with a trailing comma
    ACT:     check_structure
    ASSERT:  one structure error at the comma
    """
    (actual,) = check_structure(_context('{"a":1,}', "json"))

    assert (actual.category, actual.summary, actual.where.span.start_offset) == (
        "structure",
        "Invalid JSON syntax: Trailing comma before }",
        6,
    )


def test_valid_json_scans_values() -> None:
    """
    ARRANGE: valid JSON holding NaN
    ACT:     check_structure
    ASSERT:  value finding rather than a structure error
    """
    (actual,) = check_structure(_context('{"a": NaN}', "json"))

    assert (actual.category, actual.severity) == ("schema", "error")


def test_empty_csv() -> None:
    """
    ARRANGE: empty CSV content
    ACT:     check_structure
    ASSERT:  empty file error
    """
    (actual,) = check_structure(_context("", "csv"))

    assert actual.summary == "Empty CSV file"


def test_csv_column_difference_of_one_is_tolerated() -> None:
    """
    ARRANGE: CSV row one column short
    ACT:     check_structure
    ASSERT:  no findings
    """
    actual = check_structure(_context("a,b,c\n1,2\n", "csv"))

    assert actual == ()


def test_csv_column_difference_of_two_is_reported() -> None:
    """
    ARRANGE: CSV row two columns short
    ACT:     check_structure
    ASSERT:  column mismatch finding
    """
    (actual,) = check_structure(_context("a,b,c\n1\n", "csv"))

    assert actual.summary == "Column count mismatch: expected 3, found 1"


def test_csv_mismatches_are_capped() -> None:
    """
    ARRANGE: CSV with seven broken rows
    ACT:     check_structure
    ASSERT:  five findings
    """
    content = "a,b,c\n" + "1\n" * 7

    actual = check_structure(_context(content, "csv"))

    assert len(actual) == 5


def test_xml_mismatched_tags() -> None:
    """
    ARRANGE: XML element never closed
    ACT:     check_structure
    ASSERT:  mismatched tags on row 1
    """
    (actual,) = check_structure(_context("<a><b></a>", "xml"))

    assert (actual.summary, actual.where.row) == ("Mismatched XML tags", 1)


def test_yaml_line_warnings_are_capped() -> None:
    """
    ARRANGE: YAML with four bare lines
    ACT:     check_structure
    ASSERT:  three warnings
    """
    actual = check_structure(_context("a\nb\nc\nd\n", "yaml"))

    assert [finding.severity for finding in actual] == ["warning"] * 3


def test_yaml_parse_failure_is_error() -> None:
    """
    ARRANGE: YAML whose lines look valid but which does not parse
    ACT:     check_structure
    ASSERT:  one structure error
    """
    (actual,) = check_structure(_context("a: [1, 2\n", "yaml"))

    assert (actual.summary, actual.severity) == ("Invalid YAML document", "error")
