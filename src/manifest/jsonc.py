"""Range-annotated parser for JSON with comments (JSONC).

Every node records the half-open ``(start, end)`` character range it
occupies in the source text, so callers can compute text edits that leave
the rest of the document, comments included, untouched.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

Range = Tuple[int, int]


class JsoncParseError(ValueError):
    """Raised for malformed JSONC text, with a 1-based line:column position."""

    def __init__(self, message: str, text: str, pos: int):
        line = text.count("\n", 0, pos) + 1
        column = pos - (text.rfind("\n", 0, pos) + 1) + 1
        self.pos = pos
        self.line = line
        self.column = column
        super().__init__(f"{message} at {line}:{column}")


@dataclass(frozen=True)
class Token:
    """A lexical token. ``kind`` is one of the punctuators, ``string``,
    ``number``, ``word``, ``line_comment`` or ``block_comment``."""
    kind: str
    start: int
    end: int

    @property
    def is_comment(self) -> bool:
        return self.kind in ("line_comment", "block_comment")


@dataclass(frozen=True)
class StringLit:
    range: Range
    value: str


@dataclass(frozen=True)
class NumberLit:
    range: Range
    raw: str


@dataclass(frozen=True)
class BooleanLit:
    range: Range
    value: bool


@dataclass(frozen=True)
class NullKeyword:
    range: Range


@dataclass(frozen=True)
class ObjectProp:
    range: Range
    name: StringLit
    value: "Value"


@dataclass(frozen=True)
class Object:
    range: Range
    properties: Tuple[ObjectProp, ...] = ()
    trailing_comma: bool = False

    def get(self, key: str) -> Optional[ObjectProp]:
        """Return the last property named ``key`` (JSON duplicate-key semantics)."""
        found = None
        for prop in self.properties:
            if prop.name.value == key:
                found = prop
        return found


@dataclass(frozen=True)
class Array:
    range: Range
    elements: Tuple["Value", ...] = ()
    trailing_comma: bool = False


Value = Union[Object, Array, StringLit, NumberLit, BooleanLit, NullKeyword]


@dataclass(frozen=True)
class JsoncDocument:
    text: str
    value: Optional[Value]


_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_WORD_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_STRING_RE = re.compile(r'"(?:[^"\\\n]|\\.)*"')
_PUNCT = "{}[]:,"


def tokenize(text: str, allow_comments: bool = True) -> List[Token]:
    """Split ``text`` into tokens, keeping comments; whitespace is dropped."""
    tokens: List[Token] = []
    pos = 0
    length = len(text)
    while pos < length:
        ch = text[pos]
        if ch in " \t\r\n\ufeff":
            pos += 1
            continue
        if ch in _PUNCT:
            tokens.append(Token(ch, pos, pos + 1))
            pos += 1
            continue
        if ch == "/" and text.startswith("//", pos):
            if not allow_comments:
                raise JsoncParseError("Comments are not allowed", text, pos)
            end = text.find("\n", pos)
            end = length if end == -1 else end
            if end > pos and text[end - 1] == "\r":
                end -= 1
            tokens.append(Token("line_comment", pos, end))
            pos = end
            continue
        if ch == "/" and text.startswith("/*", pos):
            if not allow_comments:
                raise JsoncParseError("Comments are not allowed", text, pos)
            end = text.find("*/", pos + 2)
            if end == -1:
                raise JsoncParseError("Unterminated comment", text, pos)
            tokens.append(Token("block_comment", pos, end + 2))
            pos = end + 2
            continue
        if ch == '"':
            m = _STRING_RE.match(text, pos)
            if not m:
                raise JsoncParseError("Unterminated string literal", text, pos)
            tokens.append(Token("string", pos, m.end()))
            pos = m.end()
            continue
        m = _NUMBER_RE.match(text, pos)
        if m and m.end() > pos:
            tokens.append(Token("number", pos, m.end()))
            pos = m.end()
            continue
        m = _WORD_RE.match(text, pos)
        if m:
            tokens.append(Token("word", pos, m.end()))
            pos = m.end()
            continue
        raise JsoncParseError(f"Unexpected character {ch!r}", text, pos)
    return tokens


class _Parser:
    """Recursive-descent parser over the non-comment tokens."""

    def __init__(self, text: str, tokens: List[Token], allow_trailing_commas: bool):
        self.text = text
        self.tokens = [t for t in tokens if not t.is_comment]
        self.allow_trailing_commas = allow_trailing_commas
        self.index = 0

    def _peek(self) -> Optional[Token]:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _next(self, expected: Optional[str] = None) -> Token:
        tok = self._peek()
        if tok is None:
            raise JsoncParseError("Unexpected end of input", self.text, len(self.text))
        if expected is not None and tok.kind != expected:
            raise JsoncParseError(f"Expected '{expected}'", self.text, tok.start)
        self.index += 1
        return tok

    def parse_document(self) -> Optional[Value]:
        if self._peek() is None:
            return None
        value = self.parse_value()
        extra = self._peek()
        if extra is not None:
            raise JsoncParseError("Text after the top-level value", self.text, extra.start)
        return value

    def parse_value(self) -> Value:
        tok = self._next()
        if tok.kind == "{":
            return self._parse_object(tok)
        if tok.kind == "[":
            return self._parse_array(tok)
        if tok.kind == "string":
            return self._string(tok)
        if tok.kind == "number":
            return NumberLit((tok.start, tok.end), self.text[tok.start:tok.end])
        if tok.kind == "word":
            word = self.text[tok.start:tok.end]
            if word in ("true", "false"):
                return BooleanLit((tok.start, tok.end), word == "true")
            if word == "null":
                return NullKeyword((tok.start, tok.end))
            raise JsoncParseError(f"Unexpected word '{word}'", self.text, tok.start)
        raise JsoncParseError(f"Unexpected token '{tok.kind}'", self.text, tok.start)

    def _string(self, tok: Token) -> StringLit:
        raw = self.text[tok.start:tok.end]
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise JsoncParseError("Invalid string literal", self.text, tok.start) from exc
        return StringLit((tok.start, tok.end), value)

    def _parse_object(self, open_tok: Token) -> Object:
        props: List[ObjectProp] = []
        trailing = False
        while True:
            tok = self._peek()
            if tok is None:
                raise JsoncParseError("Unterminated object", self.text, open_tok.start)
            if tok.kind == "}":
                close = self._next()
                return Object((open_tok.start, close.end), tuple(props), trailing)
            if props and not trailing:
                raise JsoncParseError("Expected ',' or '}'", self.text, tok.start)
            name_tok = self._next("string")
            name = self._string(name_tok)
            self._next(":")
            value = self.parse_value()
            props.append(ObjectProp((name_tok.start, value.range[1]), name, value))
            trailing = False
            if self._peek() is not None and self._peek().kind == ",":
                comma = self._next()
                trailing = True
                after = self._peek()
                if after is not None and after.kind == "}" and not self.allow_trailing_commas:
                    raise JsoncParseError("Trailing commas are not allowed", self.text, comma.start)

    def _parse_array(self, open_tok: Token) -> Array:
        elements: List[Value] = []
        trailing = False
        while True:
            tok = self._peek()
            if tok is None:
                raise JsoncParseError("Unterminated array", self.text, open_tok.start)
            if tok.kind == "]":
                close = self._next()
                return Array((open_tok.start, close.end), tuple(elements), trailing)
            if elements and not trailing:
                raise JsoncParseError("Expected ',' or ']'", self.text, tok.start)
            elements.append(self.parse_value())
            trailing = False
            if self._peek() is not None and self._peek().kind == ",":
                comma = self._next()
                trailing = True
                after = self._peek()
                if after is not None and after.kind == "]" and not self.allow_trailing_commas:
                    raise JsoncParseError("Trailing commas are not allowed", self.text, comma.start)


def parse_to_ast(text: str, allow_comments: bool = True, allow_trailing_commas: bool = True) -> JsoncDocument:
    """Parse ``text`` into a range-annotated document.

    Raises:
        JsoncParseError: When the text is not well-formed.
    """
    tokens = tokenize(text, allow_comments=allow_comments)
    parser = _Parser(text, tokens, allow_trailing_commas)
    value = parser.parse_document()
    return JsoncDocument(text=text, value=value)


def to_python(value: Optional[Value]) -> Any:
    """Convert a parsed node into plain Python data (dicts keep source order)."""
    if value is None or isinstance(value, NullKeyword):
        return None
    if isinstance(value, Object):
        return {prop.name.value: to_python(prop.value) for prop in value.properties}
    if isinstance(value, Array):
        return [to_python(v) for v in value.elements]
    if isinstance(value, StringLit):
        return value.value
    if isinstance(value, BooleanLit):
        return value.value
    return json.loads(value.raw)
