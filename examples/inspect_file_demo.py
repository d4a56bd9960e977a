#!/usr/bin/env python3
"""
Inspection Demo for the data-detective package.

This script runs the structure validator and the inspection engine over a few
small documents, showing structural repairs, evidence-backed findings and the
JSON report written for downstream consumers.
"""

import sys
import tempfile
from pathlib import Path

from data_detective import (
    Finding,
    SourceMapper,
    inspect_content,
    inspect_file,
    repair_structure,
    save_inspection_report,
)

_ORDERS_CSV = """order_id,status,amount,start_date,end_date
1,shipped,120.50,2024-01-03,2024-01-05
2,shipped,89.99,2024-01-04,2024-01-02
3,pending,-15.00,2024-01-05,2024-01-09
4,shipped,42.00,2024-01-06,2024-01-08
4,cancelled,18.75,2024-01-07,2024-01-07
"""

_PREVIOUS_JSON = """[
  {"id": 1, "tier": "gold"},
  {"id": 2, "tier": "silver"}
]"""

_CURRENT_JSON = """[
  {"id": 1, "tier": "gold", "email": "a@example.com"},
  {"id": 2, "tier": "platinum", "email": "b@example.com"}
]"""


def print_separator(title: str) -> None:
    """Print a formatted section separator."""
    print(f"\n{'=' * 60}")
    print(f" {title}")
    print(f"{'=' * 60}")


def print_finding(finding: Finding) -> None:
    location = finding.location
    where = f"row {location.row}" if location.row is not None else "document"
    if location.column is not None:
        where += f", col {location.column}"

    print(f"   [{finding.severity:7}] {finding.id:6} {finding.summary} ({where})")
    print(f"             observed: {finding.evidence.observed!r}")
    print(f"             action:   {finding.suggested_action}")


def demo_structure_repair() -> None:
    """Demonstrate validating and repairing broken JSON."""
    print_separator("🔧 STRUCTURE VALIDATION AND REPAIR")

    broken = '{"name": "widget", "tags": ["a", "b",],'
    result = repair_structure(broken, "json")

    print(f"Input:   {broken}")
    for issue in result.issues:
        fixable = "auto-fixable" if issue.can_auto_fix else "manual"
        print(f"   line {issue.line}, col {issue.column}: {issue.message} ({fixable})")
    print(f"Repaired: {result.fixed_content}")

    mapper = SourceMapper(broken)
    first = result.issues[0] if result.issues else None
    if first is not None:
        position = mapper.offset_to_position(first.offset)
        print(f"First issue at offset {position.offset} -> line {position.line}")


def demo_csv_inspection() -> None:
    """Demonstrate inspecting a CSV export with logic and anomaly problems."""
    print_separator("🔍 CSV INSPECTION")

    findings = inspect_content(_ORDERS_CSV, file_name="orders.csv")
    print(f"✅ {len(findings)} findings")
    for finding in findings:
        print_finding(finding)


def demo_drift_report() -> None:
    """Demonstrate comparing two versions and saving the report."""
    print_separator("📈 DRIFT BETWEEN VERSIONS")

    with tempfile.TemporaryDirectory() as workdir:
        current = Path(workdir) / "customers.json"
        previous = Path(workdir) / "customers.previous.json"
        current.write_text(_CURRENT_JSON, encoding="utf-8")
        previous.write_text(_PREVIOUS_JSON, encoding="utf-8")

        report = inspect_file(current, previous_path=previous)
        for finding in report.findings:
            print_finding(finding)

        dest = save_inspection_report(report, Path(workdir) / "report.json")
        print(f"\n💾 Report written to {dest.name}")
        print(f"   By severity: {report.findings_by_severity}")
        print(f"   By category: {report.findings_by_category}")


def main() -> None:
    """Main demonstration function."""
    print("🚀 DATA DETECTIVE - INSPECTION DEMONSTRATION")

    try:
        demo_structure_repair()
        demo_csv_inspection()
        demo_drift_report()
    except Exception as e:
        print(f"❌ Demo failed: {e}")
        sys.exit(1)

    print_separator("✅ INSPECTION DEMO COMPLETE")


if __name__ == "__main__":
    main()
