# inspection/report.py

import json
import logging
from collections import Counter
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from data_detective.schemas import FileType, Finding, InspectionReport

logger = logging.getLogger(__name__)


def build_inspection_report(
    findings: Sequence[Finding],
    file_name: str,
    file_type: FileType,
) -> InspectionReport:
    """
    Wrap the findings of one inspection in a serialisable report.

    Args:
        findings: Sorted findings from inspect_content.
        file_name: Name of the inspected file.
        file_type: Format the file was inspected as.

    Returns:
        InspectionReport: Machine-readable report envelope.
    """
    return InspectionReport(
        generated_at=datetime.now(UTC).isoformat(),
        file_name=file_name,
        file_type=file_type,
        total_findings=len(findings),
        findings_by_severity=dict(Counter(finding.severity for finding in findings)),
        findings_by_category=dict(Counter(finding.category for finding in findings)),
        findings=tuple(findings),
    )


def save_inspection_report(report: InspectionReport, dest: Path | str) -> Path:
    """
    Write the inspection report as JSON.

    Args:
        report: The inspection report to persist.
        dest: File to write; missing parent directories are created.

    Returns:
        Path: Path to the written JSON file.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    dest.write_text(
        json.dumps(
            report.model_dump(mode="json"),
            indent=2,
            ensure_ascii=False,
        )
        + "\n",
        encoding="utf-8",
    )

    logger.info("Inspection report saved to %s", dest)
    return dest
