# schemas/findings.py

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

FileType = Literal["json", "csv", "xml", "yaml"]
Category = Literal["anomaly", "schema", "logic", "structure", "drift"]
Severity = Literal["error", "warning", "info"]
Confidence = Literal["high", "medium", "low"]


class OffsetRange(BaseModel):
    """
    Half-open character span into the original source text.

    Offsets are the durable coordinate system; line and column values are
    always derived from them on demand.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    start_offset: int
    end_offset: int


class DisplayRange(OffsetRange):
    """
    An OffsetRange together with its derived 1-based line and column bounds.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int


class Evidence(BaseModel):
    """
    Reproducible proof backing a finding.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    observed: Any = None
    expected_range: str | None = None
    statistic: str | None = None
    context: str | None = None
    baseline: Any = None

    def is_empty(self) -> bool:
        """
        Check whether no evidence entry carries a value.

        Returns:
            bool: True when every entry is None.
        """
        return not self.model_dump(exclude_none=True)


class FindingLocation(BaseModel):
    """
    Where a finding applies.

    ``span`` is present when the finding resolved to an exact source range;
    otherwise only ``row`` (possibly None) is known.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    row: int | None = None
    column: int | None = None
    field: str | None = None
    span: DisplayRange | None = None


class Finding(BaseModel):
    """
    A single evidence-backed issue reported by an inspection.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    id: str
    category: Category
    severity: Severity
    confidence: Confidence
    location: FindingLocation
    summary: str
    evidence: Evidence
    why_it_matters: str
    suggested_action: str

    @model_validator(mode="after")
    def _require_evidence(self) -> "Finding":
        if self.evidence.is_empty():
            raise ValueError("a finding must carry at least one evidence entry")
        return self


class InspectionReport(BaseModel):
    """
    Machine-readable envelope for one inspected file.

    Summarises the findings by severity and category, serialisable as JSON for
    downstream consumers.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    generated_at: str
    file_name: str
    file_type: FileType
    total_findings: int
    findings_by_severity: dict[str, int]
    findings_by_category: dict[str, int]
    findings: tuple[Finding, ...]
