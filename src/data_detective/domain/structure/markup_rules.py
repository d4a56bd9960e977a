# structure/markup_rules.py

import re

from data_detective.domain.source_map import SourceMapper

from ._issues import IssueDraft

_OPEN_TAG = re.compile(r"<(\w+)[^>]*>")
_CLOSE_TAG = re.compile(r"</(\w+)>")


def count_xml_tags(content: str) -> tuple[int, int]:
    """
    Count opening and closing XML tags.

    Self-closing tags and processing instructions are not opening tags.

    Returns:
        tuple[int, int]: Opening and closing tag counts.
    """
    opening = sum(
        1
        for match in _OPEN_TAG.finditer(content)
        if not match.group().endswith("/>")
    )
    closing = sum(1 for _ in _CLOSE_TAG.finditer(content))
    return opening, closing


def check_xml(content: str) -> tuple[IssueDraft, ...]:
    """
    Check that every opening XML tag has a closing tag.

    Only tag counts are compared; nesting order is not checked.

    Returns:
        tuple[IssueDraft, ...]: One issue when the counts differ.
    """
    opening, closing = count_xml_tags(content)
    if opening == closing:
        return ()

    return (
        IssueDraft(
            type="error",
            pattern="XML_MISMATCHED_TAGS",
            offset=0,
            message=f"Mismatched XML tags: {opening} opening, {closing} closing",
            suggested_fix="Ensure every opening tag has matching closing tag",
            can_auto_fix=False,
            observed=f"{closing} closing tags",
            context=f"{opening} opening tags found",
            rule_violated="XML Well-Formedness",
            original_text="Multiple lines",
        ),
    )


def check_yaml(content: str) -> tuple[IssueDraft, ...]:
    """
    Check that each YAML line is a key/value pair or a list item.

    Blank lines and comments are ignored.

    Returns:
        tuple[IssueDraft, ...]: One warning per offending line.
    """
    return tuple(
        IssueDraft(
            type="warning",
            pattern="YAML_INVALID_SYNTAX",
            offset=line.start + len(line.text) - len(line.text.lstrip()),
            message="Invalid YAML syntax",
            suggested_fix='Use "key: value" format or list items with "-"',
            can_auto_fix=False,
            observed=line.text.strip()[:50],
            context="YAML requires key:value pairs or list items",
            rule_violated="YAML Specification",
        )
        for line in SourceMapper(content).iter_lines()
        if not is_yaml_line_valid(line.text)
    )


def is_yaml_line_valid(text: str) -> bool:
    stripped = text.strip()
    if not stripped or stripped.startswith("#"):
        return True
    return ":" in stripped or stripped.startswith("-")
