# domain/structure/test_validator.py

import pytest

from data_detective.domain.structure import StructureValidator, repair_structure

pytestmark = pytest.mark.unit


def test_validate_trailing_comma() -> None:
    """
    ARRANGE: JSON with a trailing comma
    ACT:     validate
    ASSERT:  invalid with one auto-fixable error
    """
    actual = StructureValidator('{"a":1,}', "json").validate()

    assert (
        actual.is_valid,
        actual.summary.total_issues,
        actual.summary.errors,
        actual.summary.auto_fixable,
    ) == (False, 1, 1, 1)


def test_validate_derives_issue_position() -> None:
    """
    ARRANGE: JSON with a trailing comma
    ACT:     validate
    ASSERT:  issue numbered and positioned at the comma
    """
    (actual,) = StructureValidator('{"a":1,}', "json").validate().issues

    assert (actual.id, actual.line, actual.column, actual.original_text) == (
        "struct-1",
        1,
        7,
        '{"a":1,}',
    )


def test_validate_is_repeatable() -> None:
    """
    ARRANGE: validator over broken CSV
    ACT:     validate twice
    ASSERT:  equal results
    """
    validator = StructureValidator("a,b\n1\n", "csv")

    actual = validator.validate()

    assert actual == validator.validate()


def test_warnings_keep_document_valid() -> None:
    """
    ARRANGE: YAML with one bare line
    ACT:     validate
    ASSERT:  valid with one warning
    """
    actual = StructureValidator("key: value\nbare line\n", "yaml").validate()

    assert (actual.is_valid, actual.summary.warnings) == (True, 1)


def test_auto_fix_trailing_comma() -> None:
    """
    ARRANGE: JSON with a trailing comma
    ACT:     auto_fix
    ASSERT:  comma removed
    """
    actual = StructureValidator('{"a":1,}', "json").auto_fix()

    assert actual == '{"a":1}'


def test_auto_fix_applies_fixes_back_to_front() -> None:
    """
    ARRANGE: JSON with two trailing commas on one line
    ACT:     auto_fix
    ASSERT:  both removed
    """
    actual = StructureValidator('{"a":[1,],"b":2,}', "json").auto_fix()

    assert actual == '{"a":[1],"b":2}'


def test_auto_fix_closes_unclosed_containers() -> None:
    """
    ARRANGE: JSON object left open
    ACT:     auto_fix
    ASSERT:  closing brace appended
    """
    actual = StructureValidator('{"a": [1, 2]', "json").auto_fix()

    assert actual == '{"a": [1, 2]}'


def test_auto_fix_pads_every_short_row() -> None:
    """
    ARRANGE: CSV with two short rows
    ACT:     auto_fix
    ASSERT:  both rows padded to the header width
    """
    actual = StructureValidator("a,b,c\n1\n2,3\n", "csv").auto_fix()

    assert actual == "a,b,c\n1,,\n2,3,\n"


def test_repair_structure_sets_fixed_content() -> None:
    """
    ARRANGE: JSON with a trailing comma
    ACT:     repair_structure
    ASSERT:  fixed content is the repaired text
    """
    actual = repair_structure('{"a":1,}', "json")

    assert actual.fixed_content == '{"a":1}'


def test_repair_structure_leaves_valid_content_alone() -> None:
    """
    ARRANGE: valid JSON
    ACT:     repair_structure
    ASSERT:  valid and no fixed content
    """
    actual = repair_structure('{"a": 1}', "json")

    assert (actual.is_valid, actual.fixed_content) == (True, None)
