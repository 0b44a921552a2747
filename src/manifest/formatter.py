"""Comment-preserving formatter for JSON and JSONC manifests.

Rules:

* An object or array stays on one line when its source had no line break
  inside it, holds no comments and fits within ``line_width``; otherwise
  every member goes on its own line.
* Comments are kept: a comment on the same line as the preceding member
  stays trailing, others get their own line. A single blank line between
  members is preserved.
* Trailing commas are dropped.
* ``package.json`` is strict JSON (no comments, no trailing commas) and
  every non-empty container is expanded, matching how npm writes it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

from constants import Constants
from .jsonc import JsoncParseError, Token, parse_to_ast, tokenize

logger = logging.getLogger(__name__)


class FormatError(ValueError):
    """Raised when text cannot be formatted."""


@dataclass(frozen=True)
class FmtOptions:
    """Formatting preferences, as found in a config file's ``fmt`` section."""
    use_tabs: bool = False
    indent_width: int = 2
    line_width: int = 80

    @classmethod
    def from_config(cls, fmt: object) -> "FmtOptions":
        """Build options from a ``fmt`` mapping; unknown or mistyped keys fall back to defaults.

        Both the flat layout (``{"fmt": {"useTabs": true}}``) and the older
        nested one (``{"fmt": {"options": {...}}}``) are accepted.
        """
        if not isinstance(fmt, dict):
            return cls()
        source = fmt.get("options") if isinstance(fmt.get("options"), dict) else fmt
        defaults = cls()
        use_tabs = source.get("useTabs", defaults.use_tabs)
        indent_width = source.get("indentWidth", defaults.indent_width)
        line_width = source.get("lineWidth", defaults.line_width)
        return cls(
            use_tabs=use_tabs if isinstance(use_tabs, bool) else defaults.use_tabs,
            indent_width=indent_width if _positive_int(indent_width) else defaults.indent_width,
            line_width=line_width if _positive_int(line_width) else defaults.line_width,
        )


def _positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_strict_json(path: str) -> bool:
    """True for manifests that must stay plain JSON (``package.json``)."""
    return os.path.basename(str(path)) == Constants.PACKAGE_JSON_FILE


@dataclass
class _Member:
    key: Optional[str]
    value_index: int
    blank_before: bool


@dataclass
class _Comment:
    token: Token
    trailing: bool
    blank_before: bool


class _Printer:
    """Renders a token stream with the rules described in the module docstring."""

    def __init__(self, text: str, tokens: List[Token], options: FmtOptions, expand_all: bool):
        self.text = text
        self.tokens = tokens
        self.options = options
        self.expand_all = expand_all
        self.unit = "\t" if options.use_tabs else " " * options.indent_width
        self.match = {}
        stack = []
        for i, tok in enumerate(tokens):
            if tok.kind in "{[":
                stack.append(i)
            elif tok.kind in "}]":
                self.match[stack.pop()] = i

    def _src(self, tok: Token) -> str:
        return self.text[tok.start:tok.end]

    def _newlines(self, start: int, end: int) -> int:
        return self.text.count("\n", start, end)

    def _end_index(self, i: int) -> int:
        return self.match.get(i, i)

    def print_document(self) -> str:
        lines: List[str] = []
        prev_end = 0
        i = 0
        while i < len(self.tokens):
            tok = self.tokens[i]
            nl = self._newlines(prev_end, tok.start)
            if tok.is_comment:
                if lines and nl == 0:
                    lines[-1] += " " + self._src(tok)
                else:
                    if lines and nl >= 2:
                        lines.append("")
                    lines.append(self._src(tok))
                prev_end = tok.end
                i += 1
                continue
            if lines and nl >= 2:
                lines.append("")
            rendered = self._render_value(i, 0, 0)
            lines.extend(rendered.split("\n"))
            end = self._end_index(i)
            prev_end = self.tokens[end].end
            i = end + 1
        return "\n".join(lines) + "\n"

    def _render_value(self, i: int, level: int, column: int) -> str:
        tok = self.tokens[i]
        if tok.kind in "{[":
            return self._render_container(i, level, column)
        return self._src(tok)

    def _collect(self, open_i: int, close_i: int, is_obj: bool) -> List[object]:
        items: List[object] = []
        prev_end = self.tokens[open_i].end
        after_open = True
        k = open_i + 1
        while k < close_i:
            tok = self.tokens[k]
            nl = self._newlines(prev_end, tok.start)
            if tok.is_comment:
                items.append(_Comment(tok, trailing=not after_open and nl == 0, blank_before=bool(items) and nl >= 2))
                prev_end = tok.end
                k += 1
                continue
            if tok.kind == ",":
                prev_end = tok.end
                k += 1
                continue
            if is_obj:
                if k + 2 >= close_i or self.tokens[k + 1].kind != ":" or self.tokens[k + 2].is_comment:
                    raise FormatError("Comments inside a property are not supported")
                key = self._src(tok)
                value_i = k + 2
            else:
                key = None
                value_i = k
            items.append(_Member(key, value_i, blank_before=bool(items) and nl >= 2))
            end = self._end_index(value_i)
            prev_end = self.tokens[end].end
            after_open = False
            k = end + 1
        return items

    def _render_container(self, open_i: int, level: int, column: int) -> str:
        close_i = self.match[open_i]
        open_tok, close_tok = self.tokens[open_i], self.tokens[close_i]
        is_obj = open_tok.kind == "{"
        items = self._collect(open_i, close_i, is_obj)
        members = [it for it in items if isinstance(it, _Member)]
        if not items:
            return "{}" if is_obj else "[]"

        forced = (
            len(members) != len(items)
            or (self.expand_all and bool(members))
            or "\n" in self.text[open_tok.end:close_tok.start]
        )
        if not forced:
            single = self._single_line(members, is_obj, level, column)
            if single is not None and column + len(single) <= self.options.line_width:
                return single
        return self._multi_line(items, is_obj, level)

    def _member_text(self, member: _Member, level: int, column: int) -> str:
        prefix = f"{member.key}: " if member.key is not None else ""
        return prefix + self._render_value(member.value_index, level, column + len(prefix))

    def _single_line(self, members: List[_Member], is_obj: bool, level: int, column: int) -> Optional[str]:
        parts = []
        for member in members:
            part = self._member_text(member, level, column)
            if "\n" in part:
                return None
            parts.append(part)
        if is_obj:
            return "{ " + ", ".join(parts) + " }"
        return "[" + ", ".join(parts) + "]"

    def _multi_line(self, items: List[object], is_obj: bool, level: int) -> str:
        inner = self.unit * (level + 1)
        members = [it for it in items if isinstance(it, _Member)]
        last = members[-1] if members else None
        lines: List[str] = []
        for item in items:
            if isinstance(item, _Comment):
                if item.trailing and lines:
                    lines[-1] += " " + self._src(item.token)
                    continue
                if item.blank_before and lines:
                    lines.append("")
                lines.append(inner + self._src(item.token))
                continue
            if item.blank_before and lines:
                lines.append("")
            text = self._member_text(item, level + 1, len(inner))
            lines.append(inner + text + ("" if item is last else ","))
        open_ch, close_ch = ("{", "}") if is_obj else ("[", "]")
        return open_ch + "\n" + "\n".join(lines) + "\n" + self.unit * level + close_ch


def format_json(path: str, text: str, options: FmtOptions) -> Optional[str]:
    """Format manifest text using the dialect implied by ``path``.

    Returns:
        The formatted text, or None when the text is already formatted.

    Raises:
        FormatError: When the text is not valid for the dialect.
    """
    strict = is_strict_json(path)
    try:
        doc = parse_to_ast(text, allow_comments=not strict, allow_trailing_commas=not strict)
        tokens = tokenize(text, allow_comments=not strict)
    except JsoncParseError as exc:
        raise FormatError(f"Cannot format {path}: {exc}") from exc
    if doc.value is None:
        return None
    formatted = _Printer(text, tokens, options, expand_all=strict).print_document()
    return None if formatted == text else formatted


def format_or_original(path: str, text: str, options: FmtOptions) -> Tuple[str, bool]:
    """Format ``text`` and fall back to it unchanged when formatting fails.

    Returns:
        Tuple of (text, formatted_ok).
    """
    try:
        formatted = format_json(path, text, options)
    except FormatError as exc:
        logger.debug("Formatting skipped: %s", exc)
        return text, False
    return (formatted if formatted is not None else text), True
