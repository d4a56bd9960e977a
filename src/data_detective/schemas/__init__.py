# schemas/__init__.py

from .findings import (
    Category,
    Confidence,
    DisplayRange,
    Evidence,
    FileType,
    Finding,
    FindingLocation,
    InspectionReport,
    OffsetRange,
    Severity,
)
from .structure import (
    StructureEvidence,
    StructureIssue,
    StructureSummary,
    StructureValidationResult,
)

__all__ = [
    # findings
    "Category",
    "Confidence",
    "DisplayRange",
    "Evidence",
    "FileType",
    "Finding",
    "FindingLocation",
    "InspectionReport",
    "OffsetRange",
    "Severity",
    # structure
    "StructureEvidence",
    "StructureIssue",
    "StructureSummary",
    "StructureValidationResult",
]
