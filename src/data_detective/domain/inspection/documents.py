# inspection/documents.py

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from data_detective.domain._utils import (
    JsonKind,
    JsonNode,
    JsonParseError,
    coerce_csv_value,
    parse_json,
    scan_csv_line,
    to_python,
)
from data_detective.domain.source_map import SourceMapper
from data_detective.schemas import FileType, OffsetRange

from .models import AnalysisSettings, Located, Location, Unlocatable

logger = logging.getLogger(__name__)

_YAML_LINE = re.compile(r"^\w+:\s*.+$", re.MULTILINE)
_FILE_TYPES = frozenset({"json", "csv", "xml", "yaml"})

Record = dict[str, Any]


class DocumentError(Exception):
    """
    Raised when content cannot be loaded as its format.

    Attributes:
        offset: Offset of the failure in the content, when known.
    """

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


@dataclass(frozen=True)
class LocationTable:
    """
    Source positions of records and of their fields.

    Cells are keyed by (record_index, field_name). A field without its own
    entry falls back to its record's position.
    """

    records: dict[int, Location] = field(default_factory=dict)
    cells: dict[tuple[int, str], Location] = field(default_factory=dict)

    def locate(self, record_index: int, field_name: str | None = None) -> Location:
        """
        Resolve the position of a field value, or of a whole record.

        Args:
            record_index: Zero-based index of the record.
            field_name: Field within the record; None locates the record.

        Returns:
            Location: The most precise position known.
        """
        if field_name is not None:
            cell = self.cells.get((record_index, field_name))
            if cell is not None:
                return cell

        record = self.records.get(record_index)
        if record is not None:
            return record
        return Unlocatable(None, f"no position recorded for record {record_index}")


@dataclass(frozen=True)
class ParsedDocument:
    """
    A loaded document: its records, their positions and, for JSON, the tree.
    """

    file_type: FileType
    records: tuple[Record, ...]
    locations: LocationTable
    json_root: JsonNode | None = None


def detect_file_type(content: str, hint: str | None = "auto") -> FileType:
    """
    Decide the format of some content.

    A known explicit hint wins. Otherwise a leading brace or bracket means
    JSON, a leading angle bracket (or an XML declaration) means XML, a
    multi-line document whose first line holds a comma means CSV, and any
    "key: value" line means YAML. Everything else is treated as JSON.

    Args:
        content: The raw document.
        hint: "json", "csv", "xml", "yaml" or "auto"; unknown hints mean auto.

    Returns:
        FileType: The detected format.
    """
    if hint in _FILE_TYPES:
        return hint

    trimmed = content.strip()
    if trimmed.startswith(("{", "[")):
        return "json"
    if trimmed.startswith("<") or "<?xml" in trimmed:
        return "xml"

    lines = trimmed.splitlines()
    if len(lines) > 1 and "," in lines[0]:
        return "csv"
    if _YAML_LINE.search(trimmed):
        return "yaml"
    return "json"


def load_document(
    content: str,
    file_type: FileType,
    settings: AnalysisSettings,
) -> ParsedDocument:
    """
    Load content into records with source positions.

    JSON and YAML yield the elements of a root array, or the root object as a
    single record. CSV yields one record per data row keyed by the header.
    XML yields no records.

    Args:
        content: The raw document.
        file_type: Its format.
        settings: Thresholds; ``csv_row_limit`` bounds the CSV rows loaded.

    Raises:
        DocumentError: When the content is not valid for its format.

    Returns:
        ParsedDocument: The loaded document.
    """
    if file_type == "json":
        document = _load_json(content)
    elif file_type == "csv":
        document = _load_csv(content, settings.csv_row_limit)
    elif file_type == "yaml":
        document = _load_yaml(content)
    else:
        document = ParsedDocument(
            file_type=file_type,
            records=(),
            locations=LocationTable(),
        )

    logger.debug(
        "Loaded %d record(s) from %s content",
        len(document.records),
        file_type,
    )
    return document


def _load_json(content: str) -> ParsedDocument:
    try:
        root = parse_json(content, allow_extended_literals=True)
    except JsonParseError as error:
        raise DocumentError(f"Invalid JSON: {error}", error.offset) from error
    except RecursionError as error:
        raise DocumentError("JSON nesting is too deep to parse") from error

    if root.kind is JsonKind.ARRAY:
        record_nodes = root.items
    elif root.kind is JsonKind.OBJECT:
        record_nodes = (root,)
    else:
        record_nodes = ()

    table = LocationTable()
    records: list[Record] = []
    for index, node in enumerate(record_nodes):
        table.records[index] = Located(
            OffsetRange(start_offset=node.start, end_offset=node.end),
        )
        if node.kind is not JsonKind.OBJECT:
            records.append({})
            continue
        records.append(to_python(node))
        for member in node.members:
            table.cells[(index, member.key)] = Located(
                OffsetRange(
                    start_offset=member.value.start,
                    end_offset=member.value.end,
                ),
            )

    return ParsedDocument(
        file_type="json",
        records=tuple(records),
        locations=table,
        json_root=root,
    )


def _load_csv(content: str, row_limit: int | None) -> ParsedDocument:
    lines = [line for line in SourceMapper(content).iter_lines() if line.text.strip()]
    table = LocationTable()
    if len(lines) < 2:
        return ParsedDocument(file_type="csv", records=(), locations=table)

    headers = [cell.value.strip() for cell in scan_csv_line(lines[0].text).cells]
    rows = lines[1:] if row_limit is None else lines[1 : row_limit + 1]

    records: list[Record] = []
    for index, line in enumerate(rows):
        cells = scan_csv_line(line.text).cells
        table.records[index] = Located(
            OffsetRange(start_offset=line.start, end_offset=line.end),
        )

        record: Record = {}
        for position, header in enumerate(headers):
            if position >= len(cells):
                record[header] = None
                continue
            cell = cells[position]
            record[header] = coerce_csv_value(cell.value)
            table.cells[(index, header)] = Located(
                OffsetRange(
                    start_offset=line.start + cell.start,
                    end_offset=line.start + cell.end,
                ),
            )
        records.append(record)

    return ParsedDocument(file_type="csv", records=tuple(records), locations=table)


def _load_yaml(content: str) -> ParsedDocument:
    try:
        root = yaml.safe_load(content)
        tree = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError as error:
        mark = getattr(error, "problem_mark", None)
        raise DocumentError(
            f"Invalid YAML: {error}",
            mark.index if mark is not None else None,
        ) from error

    if isinstance(root, list):
        items = root
        item_nodes = tree.value if isinstance(tree, yaml.SequenceNode) else []
    elif isinstance(root, dict):
        items = [root]
        item_nodes = [tree]
    else:
        items = []
        item_nodes = []

    records = tuple(_yaml_record(item) for item in items)
    return ParsedDocument(
        file_type="yaml",
        records=records,
        locations=_yaml_locations(item_nodes),
    )


def _yaml_locations(item_nodes: list[yaml.Node]) -> LocationTable:
    """
    Record the line of every YAML record and value.

    YAML positions are row-only, so every entry is Unlocatable with a row.
    """
    reason = "YAML values resolve to rows only"
    table = LocationTable()
    for index, node in enumerate(item_nodes):
        table.records[index] = Unlocatable(node.start_mark.line + 1, reason)
        if not isinstance(node, yaml.MappingNode):
            continue
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                table.cells[(index, str(key_node.value))] = Unlocatable(
                    value_node.start_mark.line + 1,
                    reason,
                )
    return table


def _yaml_record(item: object) -> Record:
    if not isinstance(item, dict):
        return {}
    return {str(key): value for key, value in item.items()}
