# data_detective/__init__.py

from .domain import (
    AnalysisSettings,
    SourceMapper,
    StructureValidator,
    analyse_content,
    default_settings,
    detect_file_type,
    inspect_content,
    inspect_file,
    repair_structure,
    save_inspection_report,
)
from .schemas import Finding, InspectionReport, StructureValidationResult

__all__ = [
    "AnalysisSettings",
    "SourceMapper",
    "StructureValidator",
    "analyse_content",
    "default_settings",
    "detect_file_type",
    "inspect_content",
    "inspect_file",
    "repair_structure",
    "save_inspection_report",
    "Finding",
    "InspectionReport",
    "StructureValidationResult",
]
