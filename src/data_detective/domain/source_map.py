# domain/source_map.py

from bisect import bisect_right
from collections.abc import Iterator
from typing import NamedTuple

from data_detective.schemas import DisplayRange, OffsetRange


class OffsetPosition(NamedTuple):
    """
    A character offset with its derived 1-based line and column.
    """

    offset: int
    line: int
    column: int


class SourceLine(NamedTuple):
    """
    One physical line of source text.

    Attributes:
        number: 1-based line number.
        start: Offset of the first character of the line.
        end: Offset just past the last character, excluding the terminator.
        text: The line content without its terminator.
        terminator: The line terminator ("\\n", "\\r\\n", "\\r" or "").
    """

    number: int
    start: int
    end: int
    text: str
    terminator: str


class SourceMapper:
    """
    Converts character offsets into display positions over one source text.

    The line-start index is built once, in a single left-to-right scan, and
    treats "\\n", "\\r\\n" and a bare "\\r" as line separators. Every method
    clamps or defaults its inputs instead of raising.
    """

    def __init__(self, source_text: str) -> None:
        self._text = source_text
        self._line_starts = _index_line_starts(source_text)

    @property
    def text(self) -> str:
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def offset_to_position(self, offset: int) -> OffsetPosition:
        """
        Convert a character offset to its 1-based line and column.

        Args:
            offset: Zero-based character offset; clamped into [0, len(text)].

        Returns:
            OffsetPosition: The clamped offset with its line and column.
        """
        clamped = max(0, min(offset, len(self._text)))
        index = bisect_right(self._line_starts, clamped) - 1
        return OffsetPosition(
            offset=clamped,
            line=index + 1,
            column=clamped - self._line_starts[index] + 1,
        )

    def position_to_offset(self, line: int, column: int) -> int:
        """
        Convert a 1-based line and column back to a character offset.

        The line is clamped into the document and the column into that line,
        whose last position is its terminator (or the end of the text).

        Args:
            line: 1-based line number.
            column: 1-based column number.

        Returns:
            int: The offset of the clamped position.
        """
        index = max(0, min(line, len(self._line_starts)) - 1)
        start = self._line_starts[index]
        if index + 1 < len(self._line_starts):
            last = self._line_starts[index + 1] - 1
        else:
            last = len(self._text)
        return max(start, min(start + column - 1, last))

    def offset_range_to_display_range(self, span: OffsetRange) -> DisplayRange:
        """
        Derive display bounds for both ends of an offset range.

        Args:
            span: The offset range to convert.

        Returns:
            DisplayRange: The original offsets with derived line/column bounds.
        """
        start = self.offset_to_position(span.start_offset)
        end = self.offset_to_position(span.end_offset)
        return DisplayRange(
            start_offset=span.start_offset,
            end_offset=span.end_offset,
            start_line=start.line,
            start_column=start.column,
            end_line=end.line,
            end_column=end.column,
        )

    def get_text_at_range(self, span: OffsetRange) -> str:
        return self._text[max(0, span.start_offset) : max(0, span.end_offset)]

    def get_line_text(self, line_number: int) -> str:
        """
        Return the text of a line without its terminator.

        Args:
            line_number: 1-based line number.

        Returns:
            str: The line text, or an empty string when out of bounds.
        """
        line = self.get_line(line_number)
        return line.text if line else ""

    def get_line(self, line_number: int) -> SourceLine | None:
        """
        Return the full description of one line.

        Args:
            line_number: 1-based line number.

        Returns:
            SourceLine | None: The line, or None when out of bounds.
        """
        if line_number < 1 or line_number > len(self._line_starts):
            return None

        start = self._line_starts[line_number - 1]
        if line_number < len(self._line_starts):
            next_start = self._line_starts[line_number]
        else:
            next_start = len(self._text)

        end = next_start
        if self._text.endswith("\r\n", start, next_start):
            end = next_start - 2
        elif next_start > start and self._text[next_start - 1] in "\r\n":
            end = next_start - 1

        return SourceLine(
            number=line_number,
            start=start,
            end=end,
            text=self._text[start:end],
            terminator=self._text[end:next_start],
        )

    def iter_lines(self) -> Iterator[SourceLine]:
        """
        Yield every line of the source in order.

        Returns:
            Iterator[SourceLine]: Lines from first to last.
        """
        for number in range(1, len(self._line_starts) + 1):
            yield self.get_line(number)

    def is_valid_offset(self, offset: int) -> bool:
        return 0 <= offset <= len(self._text)


def _index_line_starts(text: str) -> list[int]:
    """
    Build the sorted list of offsets at which each line starts.

    Returns:
        list[int]: Line-start offsets; always contains 0 for line 1.
    """
    starts = [0]
    length = len(text)
    index = 0
    while index < length:
        char = text[index]
        if char == "\n":
            starts.append(index + 1)
        elif char == "\r":
            if index + 1 < length and text[index + 1] == "\n":
                index += 1
            starts.append(index + 1)
        index += 1
    return starts
