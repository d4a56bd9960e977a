# _utils/json_parser.py

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

_WHITESPACE = " \t\n\r"
_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_STRING_CHUNK = re.compile(r'[^"\\\x00-\x1f]+')
_WORD = re.compile(r"-?[A-Za-z_][A-Za-z0-9_]*")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_VALUE_START = frozenset('{["-0123456789tfnNIu')

_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_CLOSERS = {"{": "}", "[": "]"}


class JsonErrorCode(StrEnum):
    """
    Typed reasons a JSON document failed to parse.
    """

    EMPTY_DOCUMENT = "EMPTY_DOCUMENT"
    UNEXPECTED_END = "UNEXPECTED_END"
    UNEXPECTED_TOKEN = "UNEXPECTED_TOKEN"
    TRAILING_COMMA = "TRAILING_COMMA"
    MISSING_COMMA = "MISSING_COMMA"
    MISPLACED_COMMA = "MISPLACED_COMMA"
    MISSING_COLON = "MISSING_COLON"
    INVALID_LITERAL = "INVALID_LITERAL"
    UNTERMINATED_STRING = "UNTERMINATED_STRING"
    INVALID_ESCAPE = "INVALID_ESCAPE"
    INVALID_NUMBER = "INVALID_NUMBER"
    CONTROL_CHARACTER = "CONTROL_CHARACTER"
    NON_STANDARD_LITERAL = "NON_STANDARD_LITERAL"
    EXTRA_DATA = "EXTRA_DATA"


class JsonKind(StrEnum):
    """
    Node kinds produced by the parser.

    NAN, INFINITY and UNDEFINED only appear when extended literals are allowed.
    """

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    NAN = "nan"
    INFINITY = "infinity"
    UNDEFINED = "undefined"


EXTENDED_KINDS = frozenset({JsonKind.NAN, JsonKind.INFINITY, JsonKind.UNDEFINED})


class JsonParseError(Exception):
    """
    Raised when a document is not valid JSON.

    Attributes:
        code: The classified failure.
        offset: Offset at which the parser stopped.
        token: The offending text, when there is one.
        anchor: Offset the repair applies to: the stray comma for comma errors,
            or the end of the previous value for a missing comma.
        closer: The closing character involved in a trailing comma.
        open_stack: Unclosed containers at the failure point, outermost first.
    """

    def __init__(
        self,
        code: JsonErrorCode,
        offset: int,
        *,
        token: str = "",
        anchor: int | None = None,
        closer: str | None = None,
        open_stack: tuple[str, ...] = (),
    ) -> None:
        super().__init__(f"{code} at offset {offset}")
        self.code = code
        self.offset = offset
        self.token = token
        self.anchor = offset if anchor is None else anchor
        self.closer = closer
        self.open_stack = open_stack


@dataclass(frozen=True, slots=True)
class JsonNode:
    """
    A parsed JSON value and the half-open span of its source text.
    """

    kind: JsonKind
    start: int
    end: int
    value: object = None
    members: tuple["JsonMember", ...] = ()
    items: tuple["JsonNode", ...] = ()


@dataclass(frozen=True, slots=True)
class JsonMember:
    """
    One key/value pair of an object node.
    """

    key: str
    key_start: int
    key_end: int
    value: JsonNode


def parse_json(text: str, *, allow_extended_literals: bool = False) -> JsonNode:
    """
    Parse a JSON document into a node tree that keeps source offsets.

    Args:
        text: The raw document.
        allow_extended_literals: Accept NaN, Infinity, -Infinity and undefined
            as nodes instead of rejecting them.

    Raises:
        JsonParseError: At the first grammar violation.

    Returns:
        JsonNode: The root node.
    """
    return _Parser(text, allow_extended_literals).parse_document()


def to_python(node: JsonNode) -> object:
    """
    Convert a node tree into plain Python values.

    Extended literals become None; later duplicate keys win.

    Returns:
        object: dict, list, str, int, float, bool or None.
    """
    if node.kind is JsonKind.OBJECT:
        return {member.key: to_python(member.value) for member in node.members}
    if node.kind is JsonKind.ARRAY:
        return [to_python(item) for item in node.items]
    if node.kind in EXTENDED_KINDS:
        return None
    return node.value


def iter_nodes(node: JsonNode) -> Iterator[JsonNode]:
    """
    Yield a node and all of its descendants, depth first.
    """
    yield node
    for member in node.members:
        yield from iter_nodes(member.value)
    for item in node.items:
        yield from iter_nodes(item)


def find_duplicate_keys(root: JsonNode) -> tuple[JsonMember, ...]:
    """
    Collect the first repeated occurrence of each key within every object.

    Keys are only compared within the object that holds them, so the same
    name in sibling objects is not a duplicate.

    Returns:
        tuple[JsonMember, ...]: Repeated members in document order.
    """
    repeats = []
    for node in iter_nodes(root):
        seen: set[str] = set()
        reported: set[str] = set()
        for member in node.members:
            if member.key in seen and member.key not in reported:
                repeats.append(member)
                reported.add(member.key)
            seen.add(member.key)
    return tuple(sorted(repeats, key=lambda member: member.key_start))


def find_trailing_commas(text: str) -> tuple[int, ...]:
    """
    Locate every comma that is directly followed by a closing bracket.

    String literals are skipped so commas inside values are never reported.

    Returns:
        tuple[int, ...]: Offsets of the offending commas, ascending.
    """
    found = []
    pending_comma = None
    for offset, char in _iter_structural_chars(text):
        if char in _WHITESPACE:
            continue
        if char in "}]" and pending_comma is not None:
            found.append(pending_comma)
        pending_comma = offset if char == "," else None
    return tuple(found)


def unclosed_containers(text: str) -> tuple[str, ...]:
    """
    Return the brackets still open at the end of the text, outermost first.

    Mismatched closers are ignored, so the result only describes what is
    missing at the end of the document.

    Returns:
        tuple[str, ...]: Opening characters ("{" or "[") left unclosed.
    """
    stack: list[str] = []
    for _, char in _iter_structural_chars(text):
        if char in "{[":
            stack.append(char)
        elif char in "}]" and stack and _CLOSERS[stack[-1]] == char:
            stack.pop()
    return tuple(stack)


def closers_for(stack: tuple[str, ...]) -> str:
    """
    Return the closing characters that complete an open-bracket stack.
    """
    return "".join(_CLOSERS[opener] for opener in reversed(stack))


def _iter_structural_chars(text: str) -> Iterator[tuple[int, str]]:
    """
    Yield (offset, char) for every character outside string literals.

    The opening quote of each string is yielded so callers see that a value
    started; the string body and closing quote are not.
    """
    in_string = False
    escaped = False
    for offset, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"' or char == "\n":
                in_string = False
            continue
        if char == '"':
            in_string = True
        yield offset, char


class _Parser:
    def __init__(self, text: str, allow_extended_literals: bool) -> None:
        self.text = text
        self.length = len(text)
        self.pos = 0
        self.extended = allow_extended_literals
        self.stack: list[str] = []

    def parse_document(self) -> JsonNode:
        if self.text.startswith("\ufeff"):
            self.pos = 1
        self._skip_whitespace()
        if self.pos >= self.length:
            raise JsonParseError(JsonErrorCode.EMPTY_DOCUMENT, self.pos)

        root = self._parse_value()
        self._skip_whitespace()
        if self.pos < self.length:
            raise JsonParseError(
                JsonErrorCode.EXTRA_DATA,
                self.pos,
                token=self.text[self.pos],
            )
        return root

    def _parse_value(self) -> JsonNode:
        self._skip_whitespace()
        if self.pos >= self.length:
            raise self._unexpected_end()

        char = self.text[self.pos]
        if char == "{":
            return self._parse_object()
        if char == "[":
            return self._parse_array()
        if char == '"':
            return self._parse_string()
        if char == "-" and self.text.startswith("-Infinity", self.pos):
            return self._parse_word()
        if char == "-" or char.isdigit():
            return self._parse_number()
        if char.isalpha() or char == "_":
            return self._parse_word()
        if char == ",":
            raise JsonParseError(JsonErrorCode.MISPLACED_COMMA, self.pos, token=",")
        raise JsonParseError(JsonErrorCode.UNEXPECTED_TOKEN, self.pos, token=char)

    def _parse_object(self) -> JsonNode:
        start = self.pos
        self.pos += 1
        self.stack.append("{")
        members: list[JsonMember] = []
        comma_at: int | None = None

        self._skip_whitespace()
        if self._peek() == "}":
            self.pos += 1
            self.stack.pop()
            return JsonNode(JsonKind.OBJECT, start, self.pos)

        while True:
            self._skip_whitespace()
            char = self._peek()
            if char is None:
                raise self._unexpected_end()
            if char == "}" and comma_at is not None:
                raise JsonParseError(
                    JsonErrorCode.TRAILING_COMMA,
                    self.pos,
                    token=",",
                    anchor=comma_at,
                    closer="}",
                )
            if char == ",":
                raise JsonParseError(JsonErrorCode.MISPLACED_COMMA, self.pos, token=",")
            if char != '"':
                raise JsonParseError(
                    JsonErrorCode.UNEXPECTED_TOKEN,
                    self.pos,
                    token=self._token_at(self.pos),
                )

            key = self._parse_string()
            self._skip_whitespace()
            char = self._peek()
            if char is None:
                raise self._unexpected_end()
            if char != ":":
                raise JsonParseError(
                    JsonErrorCode.MISSING_COLON,
                    self.pos,
                    token=self._token_at(self.pos),
                    anchor=key.end,
                )
            self.pos += 1

            value = self._parse_value()
            members.append(JsonMember(key.value, key.start, key.end, value))

            self._skip_whitespace()
            char = self._peek()
            if char is None:
                raise self._unexpected_end()
            if char == ",":
                comma_at = self.pos
                self.pos += 1
                continue
            if char == "}":
                self.pos += 1
                self.stack.pop()
                return JsonNode(
                    JsonKind.OBJECT, start, self.pos, members=tuple(members)
                )
            if char == '"':
                raise JsonParseError(
                    JsonErrorCode.MISSING_COMMA,
                    self.pos,
                    token=self._token_at(self.pos),
                    anchor=value.end,
                )
            raise JsonParseError(
                JsonErrorCode.UNEXPECTED_TOKEN,
                self.pos,
                token=self._token_at(self.pos),
            )

    def _parse_array(self) -> JsonNode:
        start = self.pos
        self.pos += 1
        self.stack.append("[")
        items: list[JsonNode] = []
        comma_at: int | None = None

        self._skip_whitespace()
        if self._peek() == "]":
            self.pos += 1
            self.stack.pop()
            return JsonNode(JsonKind.ARRAY, start, self.pos)

        while True:
            self._skip_whitespace()
            char = self._peek()
            if char is None:
                raise self._unexpected_end()
            if char == "]" and comma_at is not None:
                raise JsonParseError(
                    JsonErrorCode.TRAILING_COMMA,
                    self.pos,
                    token=",",
                    anchor=comma_at,
                    closer="]",
                )

            item = self._parse_value()
            items.append(item)

            self._skip_whitespace()
            char = self._peek()
            if char is None:
                raise self._unexpected_end()
            if char == ",":
                comma_at = self.pos
                self.pos += 1
                continue
            if char == "]":
                self.pos += 1
                self.stack.pop()
                return JsonNode(JsonKind.ARRAY, start, self.pos, items=tuple(items))
            if char in _VALUE_START:
                raise JsonParseError(
                    JsonErrorCode.MISSING_COMMA,
                    self.pos,
                    token=self._token_at(self.pos),
                    anchor=item.end,
                )
            raise JsonParseError(
                JsonErrorCode.UNEXPECTED_TOKEN,
                self.pos,
                token=self._token_at(self.pos),
            )

    def _parse_string(self) -> JsonNode:
        start = self.pos
        self.pos += 1
        parts: list[str] = []

        while True:
            chunk = _STRING_CHUNK.match(self.text, self.pos)
            if chunk:
                parts.append(chunk.group())
                self.pos = chunk.end()

            if self.pos >= self.length:
                raise JsonParseError(
                    JsonErrorCode.UNTERMINATED_STRING, start, token='"'
                )

            char = self.text[self.pos]
            if char == '"':
                self.pos += 1
                return JsonNode(JsonKind.STRING, start, self.pos, value="".join(parts))
            if char == "\\":
                parts.append(self._parse_escape())
                continue
            if char in "\r\n":
                raise JsonParseError(
                    JsonErrorCode.UNTERMINATED_STRING, start, token='"'
                )
            raise JsonParseError(
                JsonErrorCode.CONTROL_CHARACTER,
                self.pos,
                token=repr(char),
            )

    def _parse_escape(self) -> str:
        escape_at = self.pos
        self.pos += 1
        if self.pos >= self.length:
            raise JsonParseError(
                JsonErrorCode.UNTERMINATED_STRING, escape_at, token="\\"
            )

        char = self.text[self.pos]
        if char in _ESCAPES:
            self.pos += 1
            return _ESCAPES[char]

        if char == "u" and _HEX4.match(self.text, self.pos + 1):
            code = int(self.text[self.pos + 1 : self.pos + 5], 16)
            self.pos += 5
            if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.pos):
                low = _HEX4.match(self.text, self.pos + 2)
                low_code = int(low.group(), 16) if low else 0
                if 0xDC00 <= low_code <= 0xDFFF:
                    self.pos += 6
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low_code - 0xDC00))
            return chr(code)

        raise JsonParseError(
            JsonErrorCode.INVALID_ESCAPE,
            escape_at,
            token=self.text[escape_at : self.pos + 1],
        )

    def _parse_number(self) -> JsonNode:
        start = self.pos
        match = _NUMBER.match(self.text, start)
        if not match:
            raise JsonParseError(
                JsonErrorCode.INVALID_NUMBER,
                start,
                token=self._token_at(start),
            )

        end = match.end()
        if end < self.length and (self.text[end].isalnum() or self.text[end] == "."):
            raise JsonParseError(
                JsonErrorCode.INVALID_NUMBER,
                start,
                token=self._token_at(start),
            )

        literal = match.group()
        self.pos = end
        if any(marker in literal for marker in ".eE"):
            return JsonNode(JsonKind.NUMBER, start, end, value=float(literal))
        try:
            number: int | float = int(literal)
        except ValueError:
            # Beyond the interpreter's integer digit limit
            number = float(literal)
        return JsonNode(JsonKind.NUMBER, start, end, value=number)

    def _parse_word(self) -> JsonNode:
        start = self.pos
        match = _WORD.match(self.text, start)
        word = match.group() if match else self.text[start]
        end = start + len(word)

        if word in ("true", "false"):
            self.pos = end
            return JsonNode(JsonKind.BOOLEAN, start, end, value=word == "true")
        if word == "null":
            self.pos = end
            return JsonNode(JsonKind.NULL, start, end)

        extended = _EXTENDED_LITERALS.get(word)
        if extended is None:
            raise JsonParseError(JsonErrorCode.INVALID_LITERAL, start, token=word)
        if not self.extended:
            raise JsonParseError(JsonErrorCode.NON_STANDARD_LITERAL, start, token=word)

        kind, value = extended
        self.pos = end
        return JsonNode(kind, start, end, value=value)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def _peek(self) -> str | None:
        return self.text[self.pos] if self.pos < self.length else None

    def _token_at(self, offset: int) -> str:
        match = _WORD.match(self.text, offset)
        return match.group() if match else self.text[offset : offset + 1]

    def _unexpected_end(self) -> JsonParseError:
        return JsonParseError(
            JsonErrorCode.UNEXPECTED_END,
            self.length,
            token="EOF",
            open_stack=tuple(self.stack),
        )


_EXTENDED_LITERALS = {
    "NaN": (JsonKind.NAN, float("nan")),
    "Infinity": (JsonKind.INFINITY, float("inf")),
    "-Infinity": (JsonKind.INFINITY, float("-inf")),
    "undefined": (JsonKind.UNDEFINED, None),
}
