# stages/drift.py

import logging

from data_detective.domain._utils import value_key

from ..context import AnalysisContext
from ..documents import DocumentError, detect_file_type, load_document
from ..models import DataProfile, FieldAnalysis, FindingDraft, Location, Unlocatable
from .profiling import build_profile

logger = logging.getLogger(__name__)


def detect_drift(
    context: AnalysisContext,
    profile: DataProfile,
    previous_content: str,
) -> tuple[FindingDraft, ...]:
    """
    Compare the current document with a previous version of it.

    The previous content is detected, loaded and profiled on its own. When
    it cannot be loaded the comparison is skipped.

    Args:
        context: The inspection in progress.
        profile: The profile of the current document.
        previous_content: The raw previous version.

    Returns:
        tuple[FindingDraft, ...]: Record-count, added-field, removed-field and
            enum-expansion findings, in that order.
    """
    previous_type = detect_file_type(previous_content)
    try:
        previous_document = load_document(
            previous_content,
            previous_type,
            context.settings,
        )
    except DocumentError as error:
        logger.warning("Skipping drift detection, previous version: %s", error)
        return ()

    previous = build_profile(
        previous_document.records,
        previous_type,
        len(previous_content),
        context.settings,
    )

    return (
        _record_count_drift(context, profile, previous)
        + _added_fields(context, profile, previous)
        + _removed_fields(profile, previous)
        + _enum_drift(context, profile, previous)
    )


def _record_count_drift(
    context: AnalysisContext,
    current: DataProfile,
    previous: DataProfile,
) -> tuple[FindingDraft, ...]:
    if previous.record_count == 0:
        return ()

    change = current.record_count - previous.record_count
    pct = change / previous.record_count * 100
    if abs(pct) < context.settings.drift_record_change_pct:
        return ()

    return (
        FindingDraft(
            category="drift",
            severity="info",
            confidence="high",
            where=Unlocatable(None, "record counts describe the whole document"),
            summary="Row count changed between versions",
            evidence={
                "observed": (
                    f"Current: {current.record_count}, "
                    f"Previous: {previous.record_count}"
                ),
                "statistic": f"{pct:.1f}% change",
            },
            why_it_matters=(
                "Significant record count change may indicate data drop or surge"
            ),
            suggested_action="Confirm upstream data volume is expected",
        ),
    )


def _added_fields(
    context: AnalysisContext,
    current: DataProfile,
    previous: DataProfile,
) -> tuple[FindingDraft, ...]:
    return tuple(
        FindingDraft(
            category="drift",
            severity="info",
            confidence="medium",
            where=_first_occurrence(context, field),
            field=field.name,
            summary=f"Field added: {field.name}",
            evidence={"observed": field.name},
            why_it_matters=(
                "Schema expansion detected. Downstream consumers may need updates"
            ),
            suggested_action="Notify consumers and update contracts if required",
        )
        for field in current.fields
        if previous.get_field(field.name) is None
    )


def _removed_fields(
    current: DataProfile,
    previous: DataProfile,
) -> tuple[FindingDraft, ...]:
    return tuple(
        FindingDraft(
            category="drift",
            severity="info",
            confidence="medium",
            where=Unlocatable(None, "field exists only in the previous version"),
            field=field.name,
            summary=f"Field removed: {field.name}",
            evidence={"observed": field.name},
            why_it_matters=(
                "Schema contraction detected. Upstream change may break consumers"
            ),
            suggested_action="Coordinate schema change with consumers",
        )
        for field in previous.fields
        if current.get_field(field.name) is None
    )


def _enum_drift(
    context: AnalysisContext,
    current: DataProfile,
    previous: DataProfile,
) -> tuple[FindingDraft, ...]:
    """
    Report values new to fields that were enum-like in both versions.
    """
    findings = []
    for field in current.fields:
        before = previous.get_field(field.name)
        if before is None or before.enum_like is None or field.enum_like is None:
            continue
        if not (before.enum_like.is_enum_like and field.enum_like.is_enum_like):
            continue

        known = set(before.enum_like.value_set)
        new_values = [key for key in field.enum_like.value_set if key not in known]
        if not new_values:
            continue

        limit = context.settings.evidence_value_limit
        findings.append(
            FindingDraft(
                category="drift",
                severity="info",
                confidence="medium",
                where=_first_occurrence(context, field, new_values[0]),
                field=field.name,
                summary=f'Enum expanded in "{field.name}"',
                evidence={
                    "observed": ", ".join(new_values[:limit]),
                    "context": (
                        f"Previous cardinality: {before.enum_like.cardinality}, "
                        f"Current: {field.enum_like.cardinality}"
                    ),
                },
                why_it_matters=(
                    "New categories introduced. Downstream validations may need "
                    "updates"
                ),
                suggested_action=(
                    "Review and update validation rules or reference data"
                ),
            ),
        )
    return tuple(findings)


def _first_occurrence(
    context: AnalysisContext,
    field: FieldAnalysis,
    key: str | None = None,
) -> Location:
    """
    Locate the first record holding a field, or holding one value of it.
    """
    for index, record in enumerate(context.records):
        if field.name not in record:
            continue
        if key is None or value_key(record[field.name]) == key:
            return context.locate(index, field.name)
    return Unlocatable(None, f'no record holds field "{field.name}"')
