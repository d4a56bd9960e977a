# schemas/test_structure.py

import pytest
from pydantic import ValidationError

from data_detective.schemas import (
    StructureEvidence,
    StructureIssue,
    StructureSummary,
    StructureValidationResult,
)

pytestmark = pytest.mark.unit


def _issue(**overrides: object) -> StructureIssue:
    fields = {
        "id": "struct-1",
        "type": "error",
        "pattern": "TRAILING_COMMA",
        "line": 1,
        "column": 7,
        "offset": 6,
        "message": "Trailing comma before }",
        "original_text": '{"a":1,}',
        "suggested_fix": "Remove trailing comma",
        "can_auto_fix": True,
        "evidence": StructureEvidence(
            observed=",}",
            context='{"a":1,}',
            rule_violated="RFC 7159 Section 2 (Grammar)",
        ),
    }
    return StructureIssue(**(fields | overrides))


def test_structure_issue_accepts_valid_data() -> None:
    """
    ARRANGE: complete issue fields
    ACT:     construct StructureIssue
    ASSERT:  pattern matches input
    """
    actual = _issue()

    assert actual.pattern == "TRAILING_COMMA"


def test_structure_issue_rejects_unknown_type() -> None:
    """
    ARRANGE: issue type other than error or warning
    ACT:     construct StructureIssue
    ASSERT:  raises ValidationError
    """
    with pytest.raises(ValidationError):
        _issue(type="info")


def test_validation_result_defaults_to_no_fixed_content() -> None:
    """
    ARRANGE: result built without fixed content
    ACT:     read fixed_content
    ASSERT:  None
    """
    result = StructureValidationResult(
        is_valid=False,
        issues=(_issue(),),
        summary=StructureSummary(total_issues=1, errors=1, warnings=0, auto_fixable=1),
    )

    actual = result.fixed_content

    assert actual is None
