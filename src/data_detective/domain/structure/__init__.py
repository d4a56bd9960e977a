# structure/__init__.py

from .csv_rules import check_csv
from .fixes import apply_fix
from .json_rules import check_json
from .markup_rules import check_xml, check_yaml, count_xml_tags
from .validator import StructureValidator, build_issues, repair_structure

__all__ = [
    "StructureValidator",
    "apply_fix",
    "build_issues",
    "check_csv",
    "check_json",
    "check_xml",
    "check_yaml",
    "count_xml_tags",
    "repair_structure",
]
