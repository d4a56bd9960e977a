# structure/json_rules.py

from dataclasses import dataclass

from data_detective.domain._utils import (
    JsonErrorCode,
    JsonNode,
    JsonParseError,
    closers_for,
    find_duplicate_keys,
    find_trailing_commas,
    parse_json,
)
from data_detective.domain.source_map import SourceMapper

from ._issues import IssueDraft, context_around

_GRAMMAR = "RFC 7159 Section 2 (Grammar)"
_STRINGS = "RFC 7159 Section 7 (Strings)"


@dataclass(frozen=True)
class _Rule:
    message: str
    suggested_fix: str
    can_auto_fix: bool
    rule_violated: str


# Message and fix templates may reference {token} and {closer}
_RULES: dict[JsonErrorCode, _Rule] = {
    JsonErrorCode.TRAILING_COMMA: _Rule(
        "Trailing comma before {closer}",
        "Remove trailing comma",
        True,
        _GRAMMAR,
    ),
    JsonErrorCode.MISSING_COMMA: _Rule(
        "Missing comma after value",
        "Add comma after the value",
        True,
        "RFC 7159 Object Grammar",
    ),
    JsonErrorCode.MISPLACED_COMMA: _Rule(
        "Comma in wrong position",
        "Remove or relocate comma",
        True,
        "RFC 7159 Structural Grammar",
    ),
    JsonErrorCode.UNEXPECTED_TOKEN: _Rule(
        "Unexpected {token}",
        "Remove or correct {token}",
        False,
        "RFC 7159 Token Grammar",
    ),
    JsonErrorCode.INVALID_LITERAL: _Rule(
        "Invalid literal {token}",
        "Use true, false, null, a number or a quoted string",
        False,
        "RFC 7159 Section 3 (Values)",
    ),
    JsonErrorCode.MISSING_COLON: _Rule(
        "Missing colon after object key",
        "Add ':' between the key and its value",
        False,
        "RFC 7159 Section 4 (Objects)",
    ),
    JsonErrorCode.UNTERMINATED_STRING: _Rule(
        "Unterminated string",
        "Close the string with a double quote",
        False,
        _STRINGS,
    ),
    JsonErrorCode.INVALID_ESCAPE: _Rule(
        "Invalid escape sequence {token}",
        "Use a valid escape such as \\n, \\\" or \\u0041",
        False,
        _STRINGS,
    ),
    JsonErrorCode.INVALID_NUMBER: _Rule(
        "Invalid number {token}",
        "Write the number without leading zeros, signs or suffixes",
        False,
        "RFC 7159 Section 6 (Numbers)",
    ),
    JsonErrorCode.CONTROL_CHARACTER: _Rule(
        "Unescaped control character {token} in string",
        "Escape the character",
        False,
        _STRINGS,
    ),
    JsonErrorCode.NON_STANDARD_LITERAL: _Rule(
        "Non-standard literal {token}",
        "Replace with null or a quoted string",
        False,
        "RFC 7159 Section 6 (Numbers)",
    ),
    JsonErrorCode.EXTRA_DATA: _Rule(
        "Unexpected data after the root value",
        "Remove the trailing content or wrap the values in an array",
        False,
        _GRAMMAR,
    ),
    JsonErrorCode.EMPTY_DOCUMENT: _Rule(
        "Empty JSON document",
        "Add a JSON value",
        False,
        _GRAMMAR,
    ),
}


def check_json(
    content: str,
    *,
    allow_extended_literals: bool = False,
) -> tuple[IssueDraft, ...]:
    """
    Check a JSON document for syntax errors and formatting warnings.

    The first parse failure is classified from its error code. The whole
    document is then swept for further trailing commas so several problems
    surface in one pass. A document that parses is checked for duplicate keys
    and inconsistent indentation instead.

    Args:
        content: The raw JSON text.
        allow_extended_literals: Accept NaN, Infinity and undefined.

    Returns:
        tuple[IssueDraft, ...]: Issues, the primary failure first.
    """
    try:
        root = parse_json(content, allow_extended_literals=allow_extended_literals)
    except JsonParseError as error:
        primary = classify_parse_error(content, error)
        return (primary,) + _sweep_trailing_commas(content, skip=primary.offset)
    except RecursionError:
        return (_generic_issue(content, 0, "nesting is too deep to parse"),)

    return _duplicate_key_issues(root) + _indentation_issues(content)


def classify_parse_error(content: str, error: JsonParseError) -> IssueDraft:
    """
    Convert a typed parse failure into a single structure issue.

    Args:
        content: The document that failed to parse.
        error: The parser's failure.

    Returns:
        IssueDraft: The classified issue, or a generic one for unknown codes.
    """
    if error.code is JsonErrorCode.UNEXPECTED_END:
        return _unexpected_end_issue(content, error)

    rule = _RULES.get(error.code)
    if rule is None:
        return _generic_issue(content, error.offset, str(error))

    closer = error.closer or "closing bracket"
    observed = error.token
    if error.code is JsonErrorCode.TRAILING_COMMA:
        observed = f",{error.closer}" if error.closer else ","

    return IssueDraft(
        type="error",
        pattern=error.code.value,
        offset=error.anchor,
        message=rule.message.format(token=error.token, closer=closer),
        suggested_fix=rule.suggested_fix.format(token=error.token, closer=closer),
        can_auto_fix=rule.can_auto_fix,
        observed=observed or error.code.value,
        context=context_around(content, error.offset, 40),
        rule_violated=rule.rule_violated,
    )


def _unexpected_end_issue(content: str, error: JsonParseError) -> IssueDraft:
    closers = closers_for(error.open_stack)
    last = content.rstrip()[-1:]
    can_fix = bool(closers) and last not in (":", ",")

    if closers:
        suggestion = f"Add {len(closers)} closing character(s) {closers}"
    else:
        suggestion = "Add missing closing character"

    return IssueDraft(
        type="error",
        pattern=JsonErrorCode.UNEXPECTED_END.value,
        offset=len(content),
        message="Unexpected end of input",
        suggested_fix=suggestion,
        can_auto_fix=can_fix,
        observed="EOF",
        context=f"Unclosed containers: {''.join(error.open_stack) or 'none'}",
        rule_violated="RFC 7159 Complete Structure",
        original_text=content[-50:],
    )


def _generic_issue(content: str, offset: int, detail: str) -> IssueDraft:
    return IssueDraft(
        type="error",
        pattern="GENERIC_SYNTAX_ERROR",
        offset=offset,
        message=f"JSON syntax error: {detail}",
        suggested_fix="Manual review required",
        can_auto_fix=False,
        observed=detail,
        context=context_around(content, offset),
        rule_violated="RFC 7159 JSON Grammar",
    )


def _sweep_trailing_commas(content: str, skip: int) -> tuple[IssueDraft, ...]:
    return tuple(
        IssueDraft(
            type="error",
            pattern=JsonErrorCode.TRAILING_COMMA.value,
            offset=offset,
            message="Trailing comma before closing bracket",
            suggested_fix="Remove trailing comma",
            can_auto_fix=True,
            observed=",",
            context=context_around(content, offset, 40),
            rule_violated=_GRAMMAR,
        )
        for offset in find_trailing_commas(content)
        if offset != skip
    )


def _duplicate_key_issues(root: JsonNode) -> tuple[IssueDraft, ...]:
    return tuple(
        IssueDraft(
            type="warning",
            pattern="DUPLICATE_OBJECT_KEY",
            offset=member.key_start,
            message=f'Duplicate object key: "{member.key}"',
            suggested_fix="Remove duplicate or rename one key",
            can_auto_fix=False,
            observed=f'Key appears multiple times: "{member.key}"',
            context="RFC 7159: Member names should be unique",
            rule_violated="RFC 7159 Section 4 (Objects)",
        )
        for member in find_duplicate_keys(root)
    )


def _indentation_issues(content: str) -> tuple[IssueDraft, ...]:
    """
    Report the first line whose indentation disagrees with its nesting depth.

    The indent unit is learned from the first indented line; every other line
    must then be indented by exactly depth times that unit, using the same
    whitespace character. Only called on documents that parsed, so string
    literals never span lines.

    Returns:
        tuple[IssueDraft, ...]: At most one warning.
    """
    mapper = SourceMapper(content)
    depth = 0
    unit: int | None = None
    indent_char: str | None = None

    for line in mapper.iter_lines():
        text = line.text.lstrip("\ufeff") if line.number == 1 else line.text
        stripped = text.strip()
        if not stripped:
            continue

        leading = text[: len(text) - len(text.lstrip())]
        expected_depth = depth - 1 if stripped[0] in "}]" else depth
        problem = None

        if len(set(leading)) > 1 or (leading and indent_char not in (None, leading[0])):
            problem = "mixes tabs and spaces"
        elif expected_depth > 0 and unit is None:
            if len(leading) % expected_depth:
                problem = f"indent of {len(leading)} at depth {expected_depth}"
            unit = len(leading) // expected_depth
        elif len(leading) != expected_depth * (unit or 0):
            problem = f"indent of {len(leading)} at depth {expected_depth}"

        if leading and indent_char is None:
            indent_char = leading[0]

        if problem:
            offset = line.start + len(line.text) - len(line.text.lstrip())
            return (
                IssueDraft(
                    type="warning",
                    pattern="INCONSISTENT_INDENTATION",
                    offset=offset,
                    message="Inconsistent indentation detected",
                    suggested_fix="Auto-format with consistent 2-space indentation",
                    can_auto_fix=True,
                    observed=f"Line {line.number} has {problem}",
                    context="Not required by RFC but affects readability",
                    rule_violated="Style Convention",
                ),
            )

        depth += _depth_change(stripped)

    return ()


def _depth_change(text: str) -> int:
    change = 0
    in_string = False
    escaped = False
    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "{[":
            change += 1
        elif char in "}]":
            change -= 1
    return change
