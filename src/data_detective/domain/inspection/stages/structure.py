# stages/structure.py

from itertools import islice

from data_detective.domain._utils import count_csv_columns
from data_detective.domain.structure import check_json, count_xml_tags
from data_detective.domain.structure.markup_rules import is_yaml_line_valid

from ..context import AnalysisContext
from ..models import FindingDraft, Unlocatable
from ._helpers import span
from .semantics import scan_json_values


def check_structure(context: AnalysisContext) -> tuple[FindingDraft, ...]:
    """
    Check that the document can be read as its format.

    JSON that parses is additionally scanned for values that are legal to the
    parser but invalid or suspicious in data.

    Args:
        context: The inspection in progress.

    Returns:
        tuple[FindingDraft, ...]: Structure findings, then value findings.
    """
    match context.file_type:
        case "json":
            return _check_json(context)
        case "csv":
            return _check_csv(context)
        case "xml":
            return _check_xml(context)
        case "yaml":
            return _check_yaml(context)
    return ()


def _check_json(context: AnalysisContext) -> tuple[FindingDraft, ...]:
    if context.document is not None and context.document.json_root is not None:
        return scan_json_values(context.document.json_root, context.settings)

    content = context.content
    return tuple(
        FindingDraft(
            category="structure",
            severity="error",
            confidence="high",
            where=span(issue.offset, min(issue.offset + 1, len(content))),
            summary=f"Invalid JSON syntax: {issue.message}",
            evidence={
                "observed": issue.observed,
                "context": f"{issue.pattern}: {issue.context}",
            },
            why_it_matters=(
                "JSON parsing failed. File cannot be read by downstream systems"
            ),
            suggested_action=issue.suggested_fix,
        )
        for issue in check_json(content, allow_extended_literals=True)
        if issue.type == "error"
    )


def _check_csv(context: AnalysisContext) -> tuple[FindingDraft, ...]:
    settings = context.settings
    lines = [line for line in context.mapper.iter_lines() if line.text.strip()]

    if not lines:
        return (
            FindingDraft(
                category="structure",
                severity="error",
                confidence="high",
                where=Unlocatable(1, "file has no lines"),
                summary="Empty CSV file",
                evidence={"observed": "No data rows"},
                why_it_matters="File contains no data and cannot be processed",
                suggested_action="Add header and data rows",
            ),
        )

    expected = count_csv_columns(lines[0].text)
    broken = (
        (line, found)
        for line, found in ((line, count_csv_columns(line.text)) for line in lines[1:])
        if abs(found - expected) > settings.csv_column_tolerance
    )

    return tuple(
        FindingDraft(
            category="structure",
            severity="error",
            confidence="high",
            where=span(line.start, line.end),
            summary=f"Column count mismatch: expected {expected}, found {found}",
            evidence={"observed": found, "expected_range": str(expected)},
            why_it_matters=(
                "Row has incorrect column count. "
                "Parsing will fail or data will misalign"
            ),
            suggested_action="Ensure all rows have same number of columns as header",
        )
        for line, found in islice(broken, settings.max_csv_structure_findings)
    )


def _check_xml(context: AnalysisContext) -> tuple[FindingDraft, ...]:
    opening, closing = count_xml_tags(context.content)
    if opening == closing:
        return ()

    return (
        FindingDraft(
            category="structure",
            severity="error",
            confidence="high",
            where=Unlocatable(1, "tag counts describe the whole document"),
            summary="Mismatched XML tags",
            evidence={
                "observed": f"{closing} closing tags",
                "expected_range": str(opening),
            },
            why_it_matters="XML is malformed. Parsers will reject the document",
            suggested_action="Ensure every opening tag has matching closing tag",
        ),
    )


def _check_yaml(context: AnalysisContext) -> tuple[FindingDraft, ...]:
    invalid = (
        line
        for line in context.mapper.iter_lines()
        if not is_yaml_line_valid(line.text)
    )
    findings = tuple(
        FindingDraft(
            category="structure",
            severity="warning",
            confidence="medium",
            where=Unlocatable(line.number, "YAML findings resolve to rows only"),
            summary="Invalid YAML syntax",
            evidence={"observed": f'Line: "{line.text.strip()[:50]}"'},
            why_it_matters="Line does not match YAML key:value format",
            suggested_action='Use "key: value" format or list items with "-"',
        )
        for line in islice(invalid, context.settings.max_yaml_structure_findings)
    )
    if findings or context.load_error is None:
        return findings

    error = context.load_error
    row = None
    if error.offset is not None:
        row = context.mapper.offset_to_position(error.offset).line

    return (
        FindingDraft(
            category="structure",
            severity="error",
            confidence="high",
            where=Unlocatable(row, "YAML findings resolve to rows only"),
            summary="Invalid YAML document",
            evidence={"observed": str(error)},
            why_it_matters=(
                "YAML parsing failed. File cannot be read by downstream systems"
            ),
            suggested_action="Check indentation, quoting and key/value separators",
        ),
    )
