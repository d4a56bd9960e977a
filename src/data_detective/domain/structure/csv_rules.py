# structure/csv_rules.py

from data_detective.domain._utils import scan_csv_line
from data_detective.domain.source_map import SourceLine, SourceMapper

from ._issues import IssueDraft


def check_csv(content: str) -> tuple[IssueDraft, ...]:
    """
    Check every non-empty CSV line against the header and RFC 4180 quoting.

    The header is the first non-blank line. Column counts are quote-aware, so
    commas inside quoted fields do not count as separators.

    Args:
        content: The raw CSV text.

    Returns:
        tuple[IssueDraft, ...]: Issues in line order.
    """
    if not content.strip():
        return (_empty_file_issue(),)

    lines = [line for line in SourceMapper(content).iter_lines() if line.text.strip()]
    header_columns = len(scan_csv_line(lines[0].text).cells)

    issues: list[IssueDraft] = []
    for line in lines:
        issues.extend(check_csv_line(line, header_columns))
    return tuple(issues)


def check_csv_line(line: SourceLine, header_columns: int) -> tuple[IssueDraft, ...]:
    """
    Check one CSV line for a column-count mismatch and quoting problems.

    Args:
        line: The line to check.
        header_columns: Number of columns in the header.

    Returns:
        tuple[IssueDraft, ...]: Issues found on this line.
    """
    scan = scan_csv_line(line.text)
    columns = len(scan.cells)
    issues: list[IssueDraft] = []

    if columns != header_columns:
        issues.append(
            IssueDraft(
                type="error",
                pattern="CSV_COLUMN_MISMATCH",
                offset=line.start,
                message=(
                    f"Column count mismatch: expected {header_columns}, "
                    f"found {columns}"
                ),
                suggested_fix=(
                    "Add missing columns"
                    if columns < header_columns
                    else "Remove extra columns"
                ),
                can_auto_fix=columns < header_columns,
                observed=f"{columns} columns",
                context=f"Header has {header_columns} columns",
                rule_violated="RFC 4180 Record Structure",
            ),
        )

    for problem in scan.problems:
        if problem.kind == "unescaped":
            issues.append(
                IssueDraft(
                    type="warning",
                    pattern="CSV_UNESCAPED_QUOTE",
                    offset=line.start + problem.column,
                    message="Unescaped quote in field",
                    suggested_fix='Wrap field in quotes or escape quote as ""',
                    can_auto_fix=False,
                    observed=f"Quote at position {problem.column + 1}",
                    context="RFC 4180: Quotes must be escaped or field must be quoted",
                    rule_violated="RFC 4180 Section 2.7",
                ),
            )
        else:
            issues.append(
                IssueDraft(
                    type="error",
                    pattern="CSV_UNCLOSED_QUOTE",
                    offset=line.end,
                    message="Unclosed quote at end of line",
                    suggested_fix="Add closing quote",
                    can_auto_fix=True,
                    observed=f"Quote opened at position {problem.column + 1}",
                    context="RFC 4180: Quoted fields must be properly closed",
                    rule_violated="RFC 4180 Section 2.6",
                ),
            )

    return tuple(issues)


def _empty_file_issue() -> IssueDraft:
    return IssueDraft(
        type="error",
        pattern="EMPTY_FILE",
        offset=0,
        message="Empty CSV file",
        suggested_fix="Add header row and data",
        can_auto_fix=False,
        observed="No content",
        context="CSV requires at least a header row",
        rule_violated="RFC 4180 Basic Structure",
        original_text="",
    )
