# structure/_issues.py

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class IssueDraft:
    """
    A structure issue before it has been numbered and given a display position.

    Rules only know offsets; the validator derives line, column and the
    original text from them with a SourceMapper.
    """

    type: Literal["error", "warning"]
    pattern: str
    offset: int
    message: str
    suggested_fix: str
    can_auto_fix: bool
    observed: str
    context: str
    rule_violated: str
    # Overrides the text of the line holding the offset
    original_text: str | None = None


def context_around(content: str, offset: int, radius: int = 20) -> str:
    """
    Return the text within ``radius`` characters either side of an offset.

    Args:
        content: The full document.
        offset: Centre of the window.
        radius: Characters to include on each side.

    Returns:
        str: The clamped window of text.
    """
    start = max(0, offset - radius)
    end = min(len(content), offset + radius)
    return content[start:end]
