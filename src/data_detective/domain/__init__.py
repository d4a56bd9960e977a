# domain/__init__.py

from .inspection import (
    AnalysisSettings,
    analyse_content,
    default_settings,
    detect_file_type,
    inspect_content,
    inspect_file,
    save_inspection_report,
)
from .source_map import SourceMapper
from .structure import StructureValidator, repair_structure

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
]
