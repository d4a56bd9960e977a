# stages/anomalies.py

from datetime import UTC, datetime, timedelta

from data_detective.domain._utils import is_finite_number, is_null, parse_date

from ..context import AnalysisContext
from ..models import DataProfile, FieldAnalysis, FindingDraft
from ._helpers import evidence_value


def detect_anomalies(
    context: AnalysisContext,
    profile: DataProfile,
) -> tuple[FindingDraft, ...]:
    """
    Flag values that are valid for their type but statistically suspicious.

    Numeric fields are checked for extreme z-scores and lone negatives, date
    fields for implausibly old or far-future dates, and populated string
    fields for placeholder tokens.

    Args:
        context: The inspection in progress.
        profile: The profile of the current document.

    Returns:
        tuple[FindingDraft, ...]: Anomaly findings in record order.
    """
    now = datetime.now(UTC).replace(tzinfo=None)
    findings: list[FindingDraft] = []

    for index, record in enumerate(context.records):
        for field in profile.fields:
            value = record.get(field.name)
            if is_null(value):
                continue
            findings.extend(
                _numeric_anomalies(context, profile, field, index, value)
                + _date_anomalies(context, field, index, value, now)
                + _placeholder_anomalies(context, field, index, value),
            )

    return tuple(findings)


def _numeric_anomalies(
    context: AnalysisContext,
    profile: DataProfile,
    field: FieldAnalysis,
    index: int,
    value: object,
) -> tuple[FindingDraft, ...]:
    stats = field.numeric_stats
    if field.data_type != "number" or stats is None:
        return ()
    if not is_finite_number(value):
        return ()

    findings = []
    where = context.locate(index, field.name)

    if stats.stdev > 0:
        z_score = abs(value - stats.mean) / stats.stdev
        if z_score > context.settings.z_score_threshold:
            findings.append(
                FindingDraft(
                    category="anomaly",
                    severity="warning",
                    confidence="high",
                    where=where,
                    field=field.name,
                    summary=f'Extreme outlier in "{field.name}"',
                    evidence={
                        "observed": value,
                        "statistic": f"Z-score: {z_score:.2f}, P95: {stats.p95}",
                    },
                    why_it_matters=(
                        f"Value is {z_score:.1f}x standard deviations from mean. "
                        "May cause analytics errors or overflow"
                    ),
                    suggested_action="Review this value or mark as invalid",
                ),
            )

    if value < 0:
        # The profile counts this value too when the record was sampled
        others = stats.negative_count - (1 if index < profile.sample_size else 0)
        if others <= 0:
            findings.append(
                FindingDraft(
                    category="anomaly",
                    severity="warning",
                    confidence="high",
                    where=where,
                    field=field.name,
                    summary=(
                        f'Negative value in typically positive field "{field.name}"'
                    ),
                    evidence={"observed": value},
                    why_it_matters=(
                        "All other values are non-negative. "
                        "This may be a data entry error"
                    ),
                    suggested_action="Verify this is intentional",
                ),
            )

    return tuple(findings)


def _date_anomalies(
    context: AnalysisContext,
    field: FieldAnalysis,
    index: int,
    value: object,
    now: datetime,
) -> tuple[FindingDraft, ...]:
    if field.data_type != "date":
        return ()

    moment = parse_date(value)
    if moment is None:
        return ()

    settings = context.settings
    observed = evidence_value(value)
    where = context.locate(index, field.name)
    findings = []

    if moment.year < settings.min_plausible_year:
        findings.append(
            FindingDraft(
                category="anomaly",
                severity="warning",
                confidence="medium",
                where=where,
                field=field.name,
                summary=f"Implausibly old date: {moment.year}",
                evidence={"observed": observed},
                why_it_matters="Date predates modern record-keeping",
                suggested_action="Verify year is correct",
            ),
        )

    horizon = now + timedelta(days=settings.future_date_years * 365)
    if moment > horizon:
        findings.append(
            FindingDraft(
                category="anomaly",
                severity="info",
                confidence="medium",
                where=where,
                field=field.name,
                summary=f"Future date: {observed}",
                evidence={"observed": observed},
                why_it_matters=(
                    f"Date is more than {settings.future_date_years} years in future"
                ),
                suggested_action="Verify if intentional",
            ),
        )

    return tuple(findings)


def _placeholder_anomalies(
    context: AnalysisContext,
    field: FieldAnalysis,
    index: int,
    value: object,
) -> tuple[FindingDraft, ...]:
    settings = context.settings
    if not isinstance(value, str):
        return ()
    if field.null_rate >= settings.placeholder_max_null_rate:
        return ()
    if field.unique_rate <= settings.placeholder_min_unique_rate:
        return ()
    if value.strip().lower() not in settings.placeholder_tokens:
        return ()

    return (
        FindingDraft(
            category="anomaly",
            severity="info",
            confidence="medium",
            where=context.locate(index, field.name),
            field=field.name,
            summary="Placeholder value in mostly populated field",
            evidence={"observed": value},
            why_it_matters=(
                "Field is rarely empty but this row has placeholder. "
                "May indicate incomplete data"
            ),
            suggested_action="Fill in actual value or mark as intentionally absent",
        ),
    )
