# _utils/csv_lines.py

from typing import Literal, NamedTuple

QuoteProblemKind = Literal["unescaped", "unclosed"]


class CsvCell(NamedTuple):
    """
    One field of a CSV line.

    Attributes:
        value: Field text with enclosing quotes removed and "" unescaped.
        start: Offset of the field's first character within the line.
        end: Offset just past the field's last character within the line.
    """

    value: str
    start: int
    end: int


class QuoteProblem(NamedTuple):
    """
    A quoting violation found on a single CSV line.

    ``column`` is the zero-based position of the offending quote in the line.
    """

    kind: QuoteProblemKind
    column: int


class CsvLineScan(NamedTuple):
    cells: tuple[CsvCell, ...]
    problems: tuple[QuoteProblem, ...]


def scan_csv_line(line: str) -> CsvLineScan:
    """
    Split one CSV line into cells and report its quoting problems.

    A field is quoted when its first non-blank character is a double quote.
    Inside a quoted field, "" is an escaped quote and commas are literal. A
    quote appearing mid-way through an unquoted field is kept as text and
    reported as unescaped; a line that ends inside a quoted field is reported
    as unclosed at the position of the opening quote.

    Args:
        line: One physical line, without its terminator.

    Returns:
        CsvLineScan: The cells in order and any quoting problems.
    """
    cells: list[CsvCell] = []
    problems: list[QuoteProblem] = []
    chars: list[str] = []
    field_start = 0
    opened_at: int | None = None
    in_quotes = False

    index = 0
    length = len(line)
    while index < length:
        char = line[index]

        if in_quotes:
            if char == '"' and index + 1 < length and line[index + 1] == '"':
                chars.append('"')
                index += 2
                continue
            if char == '"':
                in_quotes = False
            else:
                chars.append(char)
            index += 1
            continue

        if char == ",":
            cells.append(CsvCell("".join(chars), field_start, index))
            chars = []
            field_start = index + 1
            opened_at = None
        elif char == '"' and opened_at is None and not "".join(chars).strip():
            chars = []
            opened_at = index
            in_quotes = True
        elif char == '"':
            problems.append(QuoteProblem("unescaped", index))
            chars.append(char)
        else:
            chars.append(char)
        index += 1

    cells.append(CsvCell("".join(chars), field_start, length))

    if in_quotes and opened_at is not None:
        problems.append(QuoteProblem("unclosed", opened_at))

    return CsvLineScan(tuple(cells), tuple(problems))


def count_csv_columns(line: str) -> int:
    return len(scan_csv_line(line).cells)
