# inspection/__init__.py

from .analyse import analyse_content, inspect_content, inspect_file, sort_findings
from .documents import DocumentError, detect_file_type, load_document
from .models import (
    AnalysisSettings,
    DataProfile,
    FieldAnalysis,
    default_settings,
    tune_for_size,
)
from .report import build_inspection_report, save_inspection_report

__all__ = [
    "AnalysisSettings",
    "DataProfile",
    "DocumentError",
    "FieldAnalysis",
    "analyse_content",
    "build_inspection_report",
    "default_settings",
    "detect_file_type",
    "inspect_content",
    "inspect_file",
    "load_document",
    "save_inspection_report",
    "sort_findings",
    "tune_for_size",
]
