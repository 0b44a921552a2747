"""Minimal-edit patching of a manifest's dependency section.

The dependency object is located in the range-annotated tree and only the
text between its braces is replaced (or a new property is inserted before
the root object's closing brace). Everything else in the document, comments
and whitespace included, is carried over verbatim before the formatter runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from .formatter import FmtOptions, format_or_original
from .jsonc import Object

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextChange:
    """Replace the half-open ``range`` of the original text with ``new_text``."""
    range: Tuple[int, int]
    new_text: str


def apply_text_changes(source: str, changes: Iterable[TextChange]) -> str:
    """Apply non-overlapping changes in one pass over the untouched source.

    Raises:
        ValueError: When ranges overlap or fall outside ``source``.
    """
    ordered = sorted(changes, key=lambda c: (c.range[0], c.range[1]))
    parts: List[str] = []
    last = 0
    for change in ordered:
        start, end = change.range
        if start < last or end < start or end > len(source):
            raise ValueError(f"Invalid or overlapping text change range {start}..{end}")
        parts.append(source[last:start])
        parts.append(change.new_text)
        last = end
    parts.append(source[last:])
    return "".join(parts)


def compute_text_changes(obj: Object, generated_imports: str, imports_key: str) -> List[TextChange]:
    """Compute the single edit that installs ``generated_imports`` under ``imports_key``."""
    prop = obj.get(imports_key)
    if prop is None:
        insert_position = obj.range[1] - 1
        separator = "," if obj.properties and not obj.trailing_comma else ""
        # The newline after the brace keeps the formatter from collapsing the
        # new object onto one line.
        return [
            TextChange(
                range=(insert_position, insert_position),
                new_text=f'{separator}"{imports_key}": {{\n {generated_imports} }}',
            )
        ]
    if isinstance(prop.value, Object):
        start, end = prop.value.range
        return [TextChange(range=(start + 1, end - 1), new_text=f"\n{generated_imports}\n")]
    # existing_imports() already rejected a non-object section.
    raise AssertionError(f'"{imports_key}" is not an object; manifest changed while adding')


def update_config_file_content(
    obj: Object,
    config_file_contents: str,
    generated_imports: str,
    fmt_options: FmtOptions,
    imports_key: str,
    file_name: str,
) -> str:
    """Return the new manifest text with the dependency section replaced.

    Formatting failures fall back to the edited but unformatted text.
    """
    changes = compute_text_changes(obj, generated_imports, imports_key)
    new_text = apply_text_changes(config_file_contents, changes)
    result, formatted = format_or_original(file_name, new_text, fmt_options)
    if is_debug_enabled(logger):
        logger.debug(
            "Patched config text",
            extra=extra_context(
                event="patch",
                component="patcher",
                action="update_config_file_content",
                target=file_name,
                outcome="formatted" if formatted else "unformatted",
                inserted=obj.get(imports_key) is None,
            ),
        )
    return result
