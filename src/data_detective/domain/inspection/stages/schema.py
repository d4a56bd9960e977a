# stages/schema.py

from data_detective.domain._utils import (
    classify_value,
    closest_value,
    is_null,
    value_key,
)

from ..context import AnalysisContext
from ..models import DataProfile, FieldAnalysis, FindingDraft
from ._helpers import evidence_value

_COERCIBLE = frozenset({"number", "string"})


def check_schema(
    context: AnalysisContext,
    profile: DataProfile,
) -> tuple[FindingDraft, ...]:
    """
    Check every record against the type and value set of its fields.

    Records beyond the profiled sample are checked too, so enum values that
    first appear late in a large file are still reported.

    Args:
        context: The inspection in progress.
        profile: The profile of the current document.

    Returns:
        tuple[FindingDraft, ...]: Type and enum findings in record order.
    """
    findings: list[FindingDraft] = []
    for index, record in enumerate(context.records):
        for field in profile.fields:
            value = record.get(field.name)
            if is_null(value):
                continue

            mismatch = _type_mismatch(context, field, index, value)
            if mismatch is not None:
                findings.append(mismatch)

            violation = _enum_violation(context, field, index, value)
            if violation is not None:
                findings.append(violation)

    return tuple(findings)


def _type_mismatch(
    context: AnalysisContext,
    field: FieldAnalysis,
    index: int,
    value: object,
) -> FindingDraft | None:
    if field.data_type in ("mixed", "null"):
        return None

    actual = classify_value(value)
    if actual == field.data_type:
        return None

    # CSV cells carry no type, so numbers and strings pass for each other
    coercible = {actual, field.data_type} <= _COERCIBLE
    if coercible and context.settings.allow_numeric_string_coercion:
        return None

    return FindingDraft(
        category="schema",
        severity="warning",
        confidence="high",
        where=context.locate(index, field.name),
        field=field.name,
        summary=f'Type mismatch in "{field.name}"',
        evidence={"observed": actual, "expected_range": field.data_type},
        why_it_matters=(
            f"Field is {field.data_type} in most rows but {actual} here. "
            "May cause processing failures"
        ),
        suggested_action=f'Ensure all values in "{field.name}" are {field.data_type}',
    )


def _enum_violation(
    context: AnalysisContext,
    field: FieldAnalysis,
    index: int,
    value: object,
) -> FindingDraft | None:
    enum_like = field.enum_like
    if enum_like is None or not enum_like.is_enum_like:
        return None

    key = value_key(value)
    if key in enum_like.value_set:
        return None

    settings = context.settings
    shown = ", ".join(enum_like.value_set[: settings.evidence_value_limit])
    suggestion = closest_value(key, enum_like.value_set, settings.suggestion_cutoff)

    if suggestion is None:
        action = "Verify this is intended or correct the value"
    else:
        action = (
            "Verify this is intended or correct the value "
            f'(did you mean "{suggestion}"?)'
        )

    return FindingDraft(
        category="schema",
        severity="warning",
        confidence="medium",
        where=context.locate(index, field.name),
        field=field.name,
        summary=f'Unexpected enum value in "{field.name}"',
        evidence={
            "observed": evidence_value(value),
            "context": f"Valid values: {shown}",
        },
        why_it_matters=(
            "This value has not appeared in other records. "
            "May indicate typo or new category"
        ),
        suggested_action=action,
    )
