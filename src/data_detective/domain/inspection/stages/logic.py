# stages/logic.py

from data_detective.domain._utils import is_null, parse_date, value_key

from ..context import AnalysisContext
from ..models import DataProfile, FieldAnalysis, FindingDraft
from ._helpers import describe


def check_logic(
    context: AnalysisContext,
    profile: DataProfile,
) -> tuple[FindingDraft, ...]:
    """
    Flag records whose fields contradict each other or their neighbours.

    Args:
        context: The inspection in progress.
        profile: The profile of the current document.

    Returns:
        tuple[FindingDraft, ...]: Date-order findings, then duplicate IDs.
    """
    return _date_order_findings(context, profile) + _duplicate_id_findings(
        context,
        profile,
    )


def _find_field(profile: DataProfile, predicate) -> FieldAnalysis | None:
    return next((item for item in profile.fields if predicate(item.name.lower())), None)


def _date_order_findings(
    context: AnalysisContext,
    profile: DataProfile,
) -> tuple[FindingDraft, ...]:
    """
    Flag records whose start date falls after their end date.

    The first field named with "start" is paired with the first other field
    named with "end". Both values must parse as dates.
    """
    start_field = _find_field(profile, lambda name: "start" in name)
    if start_field is None:
        return ()
    end_field = _find_field(
        profile,
        lambda name: "end" in name and name != start_field.name.lower(),
    )
    if end_field is None:
        return ()

    findings = []
    for index, record in enumerate(context.records):
        start, end = record.get(start_field.name), record.get(end_field.name)
        if is_null(start) or is_null(end):
            continue

        start_date, end_date = parse_date(start), parse_date(end)
        if start_date is None or end_date is None or start_date <= end_date:
            continue

        findings.append(
            FindingDraft(
                category="logic",
                severity="warning",
                confidence="high",
                where=context.locate(index, start_field.name),
                field=start_field.name,
                summary="Start date is after end date",
                evidence={
                    "observed": f"{describe(start)} > {describe(end)}",
                    "context": f'Fields "{start_field.name}" and "{end_field.name}"',
                },
                why_it_matters="Logical inconsistency: start cannot be after end",
                suggested_action="Swap values or verify dates",
            ),
        )
    return tuple(findings)


def _duplicate_id_findings(
    context: AnalysisContext,
    profile: DataProfile,
) -> tuple[FindingDraft, ...]:
    """
    Flag repeated values in a field that is unique across the profiled sample.

    Every loaded record is checked, so repeats beyond the sample are found.
    """
    id_field = _find_field(
        profile,
        lambda name: name == "id" or name.endswith("_id"),
    )
    if id_field is None or id_field.unique_rate != 1.0:
        return ()

    seen: set[str] = set()
    findings = []
    for index, record in enumerate(context.records):
        value = record.get(id_field.name)
        if is_null(value):
            continue

        key = value_key(value)
        if key in seen:
            findings.append(
                FindingDraft(
                    category="logic",
                    severity="error",
                    confidence="high",
                    where=context.locate(index, id_field.name),
                    field=id_field.name,
                    summary=f"Duplicate ID: {key}",
                    evidence={"observed": key},
                    why_it_matters=(
                        "ID should be unique. Duplicates will break joins and lookups"
                    ),
                    suggested_action="Ensure all IDs are unique",
                ),
            )
        seen.add(key)
    return tuple(findings)
