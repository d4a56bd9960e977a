# stages/semantics.py

import re
from collections.abc import Iterator

from data_detective.domain._utils import (
    JsonKind,
    JsonMember,
    JsonNode,
    find_duplicate_keys,
)

from ..models import AnalysisSettings, FindingDraft
from ._helpers import span

_DATA_ARRAY_KEY = re.compile(r"^(items|data|results|records|list)", re.IGNORECASE)
_NUMERIC_KEY = re.compile(
    r"(id|count|price|amount|quantity|age|year|score|rate)",
    re.IGNORECASE,
)
_DATE_KEY = re.compile(r"(date|time|created|updated|timestamp)", re.IGNORECASE)
_NUMERIC_TEXT = re.compile(r"^-?\d+(\.\d+)?$")
_SLASHED_DATE = re.compile(r"^\d{1,2}[/-]\d{1,2}[/-]\d{2,4}$")
_BOOLEAN_TEXT = frozenset({"true", "false", "TRUE", "FALSE"})


def scan_json_values(
    root: JsonNode,
    settings: AnalysisSettings,
) -> tuple[FindingDraft, ...]:
    """
    Scan a parsed JSON tree for values that parse but should not be trusted.

    Args:
        root: Root of the document tree, parsed with extended literals.
        settings: Inspection thresholds.

    Returns:
        tuple[FindingDraft, ...]: Findings grouped by check, each group in
            document order.
    """
    members = tuple(_iter_members(root, ""))
    return (
        _non_finite_findings(members)
        + _undefined_findings(members)
        + _null_rate_findings(root, settings)
        + _empty_value_findings(members)
        + _duplicate_key_findings(root)
        + _stringly_typed_findings(members)
    )


def _iter_members(node: JsonNode, path: str) -> Iterator[tuple[str, JsonMember]]:
    """
    Yield (path, member) for every object member in document order.

    Paths use dots for keys and brackets for array indexes.
    """
    for member in node.members:
        current = f"{path}.{member.key}" if path else member.key
        yield current, member
        yield from _iter_members(member.value, current)
    for index, item in enumerate(node.items):
        yield from _iter_members(item, f"{path}[{index}]")


def _iter_arrays(node: JsonNode, path: str) -> Iterator[tuple[str, JsonNode]]:
    if node.kind is JsonKind.ARRAY:
        yield path, node
    for member in node.members:
        child = f"{path}.{member.key}" if path else member.key
        yield from _iter_arrays(member.value, child)
    for index, item in enumerate(node.items):
        yield from _iter_arrays(item, f"{path}[{index}]")


def _non_finite_findings(
    members: tuple[tuple[str, JsonMember], ...],
) -> tuple[FindingDraft, ...]:
    findings = []
    for path, member in members:
        value = member.value
        if value.kind is JsonKind.NAN:
            summary = f'Invalid value: NaN in field "{member.key}"'
            observed, expected = "NaN", "Valid number"
            why = (
                "NaN is not a valid JSON value per RFC 7159. "
                "Most systems will reject this data."
            )
            action = "Replace NaN with null or a valid number"
        elif value.kind is JsonKind.INFINITY:
            literal = "-Infinity" if value.value < 0 else "Infinity"
            summary = f'Invalid value: {literal} in field "{member.key}"'
            observed, expected = literal, "Finite number"
            why = (
                "Infinity is not a valid JSON value per RFC 7159. "
                "Data will be rejected."
            )
            action = "Replace with a large finite number or null"
        else:
            continue

        findings.append(
            FindingDraft(
                category="schema",
                severity="error",
                confidence="high",
                where=span(value.start, value.end),
                field=member.key,
                summary=summary,
                evidence={
                    "observed": observed,
                    "expected_range": expected,
                    "context": f"Field path: {path}",
                },
                why_it_matters=why,
                suggested_action=action,
            ),
        )
    return tuple(findings)


def _undefined_findings(
    members: tuple[tuple[str, JsonMember], ...],
) -> tuple[FindingDraft, ...]:
    return tuple(
        FindingDraft(
            category="schema",
            severity="warning",
            confidence="high",
            where=span(member.value.start, member.value.end),
            field=member.key,
            summary=f'Undefined value in field "{member.key}"',
            evidence={
                "observed": "undefined",
                "expected_range": "Defined value or omit field",
                "context": f"Field path: {path}",
            },
            why_it_matters=(
                "Undefined is not a valid JSON value. "
                "Field should either have a value or be omitted."
            ),
            suggested_action="Either set a value, use null, or remove the field",
        )
        for path, member in members
        if member.value.kind is JsonKind.UNDEFINED
    )


def _null_rate_findings(
    root: JsonNode,
    settings: AnalysisSettings,
) -> tuple[FindingDraft, ...]:
    """
    Report keys that are null in most records of an array of objects.

    Each key is reported once per array, at its first null value.
    """
    findings = []
    for path, array in _iter_arrays(root, ""):
        records = [item for item in array.items if item.kind is JsonKind.OBJECT]
        if not records:
            continue

        first_nulls: dict[str, JsonMember] = {}
        null_counts: dict[str, int] = {}
        for record in records:
            for member in record.members:
                if member.value.kind is JsonKind.NULL:
                    first_nulls.setdefault(member.key, member)
                    null_counts[member.key] = null_counts.get(member.key, 0) + 1

        for key, member in first_nulls.items():
            rate = null_counts[key] / len(array.items)
            if rate <= settings.high_null_rate:
                continue
            percent = round(rate * 100)
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="info",
                    confidence="medium",
                    where=span(member.value.start, member.value.end),
                    field=key,
                    summary=f'High null rate ({percent}%) in field "{key}"',
                    evidence={
                        "observed": (
                            f"{null_counts[key]} nulls out of "
                            f"{len(array.items)} records"
                        ),
                        "statistic": f"{percent}% null rate",
                        "context": f"Field path: {path}[*].{key}",
                    },
                    why_it_matters=(
                        "Fields with mostly null values may indicate missing "
                        "data or incorrect schema design"
                    ),
                    suggested_action=(
                        "Consider making this field optional or investigate "
                        "data collection"
                    ),
                ),
            )
    return tuple(findings)


def _empty_value_findings(
    members: tuple[tuple[str, JsonMember], ...],
) -> tuple[FindingDraft, ...]:
    findings = []
    for path, member in members:
        value = member.value
        where = span(value.start, value.end)
        context = f"Field path: {path}"

        if value.kind is JsonKind.STRING and value.value == "":
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="warning",
                    confidence="medium",
                    where=where,
                    field=member.key,
                    summary=f'Empty string in field "{member.key}"',
                    evidence={
                        "observed": '""',
                        "expected_range": "Non-empty string or null",
                        "context": context,
                    },
                    why_it_matters=(
                        "Empty strings can cause validation errors. "
                        "Consider using null for missing values."
                    ),
                    suggested_action=(
                        "Use null for missing values or provide a default value"
                    ),
                ),
            )
        elif (
            value.kind is JsonKind.ARRAY
            and not value.items
            and _DATA_ARRAY_KEY.match(member.key)
        ):
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="info",
                    confidence="low",
                    where=where,
                    field=member.key,
                    summary=f'Empty array in field "{member.key}"',
                    evidence={"observed": "[]", "context": context},
                    why_it_matters=(
                        "Empty data arrays may indicate no results or "
                        "incomplete data collection"
                    ),
                    suggested_action="Verify this is intentional or check data source",
                ),
            )
        elif value.kind is JsonKind.OBJECT and not value.members:
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="info",
                    confidence="low",
                    where=where,
                    field=member.key,
                    summary=f'Empty object in field "{member.key}"',
                    evidence={"observed": "{}", "context": context},
                    why_it_matters=(
                        "Empty objects may indicate missing data or schema issues"
                    ),
                    suggested_action=(
                        "Consider using null for empty objects or populate "
                        "with default values"
                    ),
                ),
            )
    return tuple(findings)


def _duplicate_key_findings(root: JsonNode) -> tuple[FindingDraft, ...]:
    return tuple(
        FindingDraft(
            category="structure",
            severity="warning",
            confidence="high",
            where=span(member.key_start, member.key_end),
            field=member.key,
            summary=f'Duplicate object key: "{member.key}"',
            evidence={
                "observed": "Key appears multiple times in same object",
                "context": f'Key "{member.key}"',
            },
            why_it_matters=(
                "Duplicate keys violate RFC 7159 recommendations. Most parsers "
                "will keep only the last value, causing silent data loss."
            ),
            suggested_action="Remove duplicate key or rename one of them",
        )
        for member in find_duplicate_keys(root)
    )


def _stringly_typed_findings(
    members: tuple[tuple[str, JsonMember], ...],
) -> tuple[FindingDraft, ...]:
    findings = []
    for path, member in members:
        value = member.value
        if value.kind is not JsonKind.STRING:
            continue

        text = value.value
        where = span(value.start, value.end)
        context = f"Field path: {path}"

        if _NUMERIC_TEXT.match(text) and _NUMERIC_KEY.search(member.key):
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="warning",
                    confidence="medium",
                    where=where,
                    field=member.key,
                    summary=f'Numeric value stored as string in field "{member.key}"',
                    evidence={
                        "observed": f'"{text}" (string)',
                        "expected_range": f"{text} (number)",
                        "context": context,
                    },
                    why_it_matters=(
                        "Numeric strings prevent calculations and may cause type "
                        "errors in downstream systems"
                    ),
                    suggested_action=f"Convert to number: {text}",
                ),
            )

        if text in _BOOLEAN_TEXT:
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="warning",
                    confidence="medium",
                    where=where,
                    field=member.key,
                    summary=f'Boolean value stored as string in field "{member.key}"',
                    evidence={
                        "observed": f'"{text}" (string)',
                        "expected_range": f"{text.lower()} (boolean)",
                        "context": context,
                    },
                    why_it_matters=(
                        "Boolean strings prevent logical operations and may cause "
                        "type errors"
                    ),
                    suggested_action=f"Convert to boolean: {text.lower()}",
                ),
            )

        if _SLASHED_DATE.match(text) and _DATE_KEY.search(member.key):
            findings.append(
                FindingDraft(
                    category="schema",
                    severity="info",
                    confidence="medium",
                    where=where,
                    field=member.key,
                    summary=f'Non-ISO date format in field "{member.key}"',
                    evidence={
                        "observed": text,
                        "expected_range": "ISO 8601 format (YYYY-MM-DD)",
                        "context": context,
                    },
                    why_it_matters=(
                        "Non-standard date formats cause parsing ambiguity and "
                        "timezone issues"
                    ),
                    suggested_action="Use ISO 8601 format for dates",
                ),
            )
    return tuple(findings)
