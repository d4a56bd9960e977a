# _utils/__init__.py

from .csv_lines import CsvCell, count_csv_columns, scan_csv_line
from .fuzzy import closest_value
from .json_parser import (
    EXTENDED_KINDS,
    JsonErrorCode,
    JsonKind,
    JsonMember,
    JsonNode,
    JsonParseError,
    closers_for,
    find_duplicate_keys,
    find_trailing_commas,
    iter_nodes,
    parse_json,
    to_python,
    unclosed_containers,
)
from .values import (
    classify_value,
    coerce_csv_value,
    is_date_value,
    is_finite_number,
    is_null,
    is_number,
    parse_date,
    value_key,
)

__all__ = [
    # csv_lines
    "CsvCell",
    "count_csv_columns",
    "scan_csv_line",
    # fuzzy
    "closest_value",
    # json_parser
    "EXTENDED_KINDS",
    "JsonErrorCode",
    "JsonKind",
    "JsonMember",
    "JsonNode",
    "JsonParseError",
    "closers_for",
    "find_duplicate_keys",
    "find_trailing_commas",
    "iter_nodes",
    "parse_json",
    "to_python",
    "unclosed_containers",
    # values
    "classify_value",
    "coerce_csv_value",
    "is_date_value",
    "is_finite_number",
    "is_null",
    "is_number",
    "parse_date",
    "value_key",
]
