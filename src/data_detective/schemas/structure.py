# schemas/structure.py

from typing import Literal

from pydantic import BaseModel, ConfigDict


class StructureEvidence(BaseModel):
    """
    What was observed, where, and which rule it breaks.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    observed: str
    context: str
    rule_violated: str


class StructureIssue(BaseModel):
    """
    A syntax-level violation found by the structure validator.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: str
    type: Literal["error", "warning"]
    pattern: str
    line: int
    column: int
    offset: int
    message: str
    original_text: str
    suggested_fix: str
    can_auto_fix: bool
    evidence: StructureEvidence


class StructureSummary(BaseModel):
    """
    Issue counts for one validation run.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    total_issues: int
    errors: int
    warnings: int
    auto_fixable: int


class StructureValidationResult(BaseModel):
    """
    Outcome of validating one document's structure.

    ``fixed_content`` is only populated when auto-fixes were applied and
    changed the text.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    is_valid: bool
    issues: tuple[StructureIssue, ...]
    summary: StructureSummary
    fixed_content: str | None = None
