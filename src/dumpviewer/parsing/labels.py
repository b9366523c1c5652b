"""Display text for indentation-dialect line labels.

Two phases:
- clean_label: strips identity markers and bracket noise, leaving the
  informational content of the line
- stylize_label: escapes the cleaned text, then adds highlight markup

Neither phase changes tree structure.
"""

from __future__ import annotations

import html
import re

# ``{#123}``, ``(#123)`` and the unclosed ``{#123 ▼`` header form
IDENTITY_MARKER_PATTERN = re.compile(r"\s*[{(]#\d+(?:\s*[▼▶])?[})]?")

# ``array:3 [`` optionally preceded by ``name:``
ARRAY_HEADER_PATTERN = re.compile(r"(?:(\S+?):\s*)?array:(\d+)\s*\[")

TRAILING_BRACKET_PATTERN = re.compile(r"\s*[\[\]{}]\s*$")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Markup phase, applied to escaped text
KEY_TOKEN_PATTERN = re.compile(r"^(#[\w-]+:)")
ARRAY_COUNT_PATTERN = re.compile(r"\barray (\d+)\b")
CLASS_PATH_PATTERN = re.compile(r"\b[A-Za-z_]\w*(?:\\[A-Za-z_]\w*)+")
ARROW_PATTERN = re.compile(r"=&gt;")


def _array_phrase(match: re.Match[str]) -> str:
    name, count = match.group(1), match.group(2)
    if name:
        return f"{name}: array {count}"
    return f"array {count}"


def clean_label(label: str) -> str:
    """Normalize a raw line label to its informational content."""
    text = IDENTITY_MARKER_PATTERN.sub("", label)
    text = ARRAY_HEADER_PATTERN.sub(_array_phrase, text)
    text = TRAILING_BRACKET_PATTERN.sub("", text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def stylize_label(label: str) -> str:
    """Render a raw label as escaped HTML with highlight spans."""
    text = html.escape(clean_label(label), quote=False)
    text = KEY_TOKEN_PATTERN.sub(r'<span class="dump-key">\1</span>', text)
    text = ARRAY_COUNT_PATTERN.sub(r'array <span class="dump-count">\1</span>', text)
    text = CLASS_PATH_PATTERN.sub(
        lambda m: f'<span class="dump-class">{m.group(0)}</span>', text, count=1
    )
    return ARROW_PATTERN.sub('<span class="dump-arrow">=&gt;</span>', text)
