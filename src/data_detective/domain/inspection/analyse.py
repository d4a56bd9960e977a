# inspection/analyse.py

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from data_detective.domain.source_map import SourceMapper
from data_detective.schemas import (
    Evidence,
    Finding,
    FindingLocation,
    InspectionReport,
)

from .context import AnalysisContext
from .documents import DocumentError, detect_file_type, load_document
from .models import (
    AnalysisSettings,
    FindingDraft,
    Located,
    Unlocatable,
    default_settings,
    tune_for_size,
)
from .report import build_inspection_report
from .stages import (
    build_profile,
    check_logic,
    check_schema,
    check_structure,
    detect_anomalies,
    detect_drift,
)

logger = logging.getLogger(__name__)

_SEVERITY_RANK = {"error": 0, "warning": 1, "info": 2}
_CONFIDENCE_RANK = {"high": 0, "medium": 1, "low": 2}
_BYTES_PER_MB = 1024 * 1024


async def analyse_content(
    content: str,
    file_name: str = "",
    file_type_hint: str = "auto",
    previous_content: str | None = None,
    settings: AnalysisSettings | None = None,
) -> list[Finding]:
    """
    Inspect content without blocking the caller's event loop.

    Runs the synchronous inspection in a worker thread; see inspect_content.

    Returns:
        list[Finding]: The sorted findings.
    """
    return await asyncio.to_thread(
        inspect_content,
        content,
        file_name,
        file_type_hint,
        previous_content,
        settings,
    )


def inspect_content(
    content: str,
    file_name: str = "",
    file_type_hint: str = "auto",
    previous_content: str | None = None,
    settings: AnalysisSettings | None = None,
) -> list[Finding]:
    """
    Run the six inspection stages over some content.

    Structure is checked first; when it reports any structural problem the
    remaining stages are skipped. Otherwise the records are profiled and then
    checked for schema, anomaly, logic and, when a previous version is given,
    drift findings. Failures inside the stages never escape: they become a
    single structural finding.

    Args:
        content: The raw document.
        file_name: Name used in log messages.
        file_type_hint: "json", "csv", "xml", "yaml" or "auto".
        previous_content: An earlier version of the document, if any.
        settings: Optional inspection thresholds (defaults to standard settings).

    Returns:
        list[Finding]: Findings sorted by severity, confidence and row.
    """
    active_settings = settings or default_settings()
    mapper = SourceMapper(content)

    try:
        drafts = _run_stages(
            content,
            file_name,
            file_type_hint,
            previous_content,
            active_settings,
            mapper,
        )
    except Exception as error:
        logger.error("Inspection of %r failed: %s", file_name, error, exc_info=True)
        drafts = (_failure_draft(error),)

    return _finalise(drafts, mapper)


def inspect_file(
    path: Path | str,
    previous_path: Path | str | None = None,
    file_type_hint: str = "auto",
    settings: AnalysisSettings | None = None,
) -> InspectionReport:
    """
    Inspect a file on disk and wrap the findings in a report.

    Args:
        path: File to inspect, read as UTF-8.
        previous_path: Optional earlier version of the file.
        file_type_hint: "json", "csv", "xml", "yaml" or "auto".
        settings: Optional inspection thresholds.

    Returns:
        InspectionReport: The completed inspection report.
    """
    source = Path(path)
    content = source.read_text(encoding="utf-8")
    previous_content = None
    if previous_path is not None:
        previous_content = Path(previous_path).read_text(encoding="utf-8")

    findings = inspect_content(
        content,
        file_name=source.name,
        file_type_hint=file_type_hint,
        previous_content=previous_content,
        settings=settings,
    )
    report = build_inspection_report(
        findings,
        file_name=source.name,
        file_type=detect_file_type(content, file_type_hint),
    )

    logger.info(
        "Inspection of %s complete: %d findings",
        source.name,
        report.total_findings,
    )
    return report


def _run_stages(
    content: str,
    file_name: str,
    file_type_hint: str,
    previous_content: str | None,
    settings: AnalysisSettings,
    mapper: SourceMapper,
) -> tuple[FindingDraft, ...]:
    """
    Execute the inspection stages in order.

    Returns:
        tuple[FindingDraft, ...]: Findings in production order.
    """
    size_mb = len(content) / _BYTES_PER_MB
    if size_mb > settings.max_file_mb:
        return (_too_large_draft(size_mb, settings),)

    tuned = tune_for_size(settings, size_mb)
    if tuned.fast_mode and not settings.fast_mode:
        logger.debug("Fast mode enabled for %r (%.2f MB)", file_name, size_mb)

    file_type = detect_file_type(content, file_type_hint)
    document, load_error = None, None
    try:
        document = load_document(content, file_type, tuned)
    except DocumentError as error:
        load_error = error

    context = AnalysisContext(
        content=content,
        file_name=file_name,
        file_type=file_type,
        settings=tuned,
        mapper=mapper,
        document=document,
        load_error=load_error,
    )

    structure = check_structure(context)
    if any(draft.category == "structure" for draft in structure):
        logger.debug("Structural problems in %r, skipping later stages", file_name)
        return structure

    profile = build_profile(context.records, file_type, len(content), tuned)

    drafts = (
        structure
        + check_schema(context, profile)
        + detect_anomalies(context, profile)
        + check_logic(context, profile)
    )
    if previous_content and previous_content.strip():
        drafts += detect_drift(context, profile, previous_content)
    return drafts


def _finalise(
    drafts: Iterable[FindingDraft],
    mapper: SourceMapper,
) -> list[Finding]:
    """
    Number the drafts, resolve their positions and sort them.

    Drafts that fail validation are dropped with a warning; ids count only
    the findings that are kept.
    """
    findings: list[Finding] = []
    for draft in drafts:
        try:
            finding = _to_finding(draft, f"det-{len(findings) + 1}", mapper)
        except ValidationError as error:
            logger.warning("Dropping finding %r: %s", draft.summary, error)
            continue
        findings.append(finding)
    return sort_findings(findings)


def _to_finding(draft: FindingDraft, finding_id: str, mapper: SourceMapper) -> Finding:
    match draft.where:
        case Located(span=span):
            display = mapper.offset_range_to_display_range(span)
            location = FindingLocation(
                row=display.start_line,
                column=display.start_column,
                field=draft.field,
                span=display,
            )
        case Unlocatable(row=row):
            location = FindingLocation(row=row, field=draft.field)

    return Finding(
        id=finding_id,
        category=draft.category,
        severity=draft.severity,
        confidence=draft.confidence,
        location=location,
        summary=draft.summary,
        evidence=Evidence(**draft.evidence),
        why_it_matters=draft.why_it_matters,
        suggested_action=draft.suggested_action,
    )


def sort_findings(findings: Iterable[Finding]) -> list[Finding]:
    """
    Order findings by severity, then confidence, then row.

    Findings without a row come last within their severity and confidence;
    ties keep their production order.

    Returns:
        list[Finding]: The sorted findings.
    """
    return sorted(
        findings,
        key=lambda finding: (
            _SEVERITY_RANK[finding.severity],
            _CONFIDENCE_RANK[finding.confidence],
            finding.location.row is None,
            finding.location.row or 0,
        ),
    )


def _too_large_draft(size_mb: float, settings: AnalysisSettings) -> FindingDraft:
    return FindingDraft(
        category="structure",
        severity="error",
        confidence="high",
        where=Unlocatable(None, "content was not analysed"),
        summary="File too large to analyze safely",
        evidence={
            "observed": f"{size_mb:.2f} MB",
            "expected_range": f"<= {settings.max_file_mb:g} MB",
        },
        why_it_matters="Analyzing very large files may exhaust available memory",
        suggested_action="Split the file into smaller parts or sample it first",
    )


def _failure_draft(error: Exception) -> FindingDraft:
    return FindingDraft(
        category="structure",
        severity="error",
        confidence="high",
        where=Unlocatable(None, "inspection failed"),
        summary="File could not be analyzed",
        evidence={
            "observed": type(error).__name__,
            "context": str(error) or None,
        },
        why_it_matters="The file could not be inspected, so its quality is unknown",
        suggested_action="Check that the file is valid and matches its declared type",
    )
