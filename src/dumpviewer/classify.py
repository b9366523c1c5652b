"""Format classification for raw dump output.

Decides which rendering strategy applies to a block of text. The checks run
in a fixed precedence order and the first match wins:

1. Embedded widget: a ``<pre class="sf-dump ...">`` fragment
2. Indentation dialect: any structural marker of the pretty-printed dump
3. JSON: bracketed text that decodes to an object or array
4. Plain text
"""

from __future__ import annotations

import json
import re
from typing import Any

from dumpviewer.models import FormatKind

# Opening pre tag of a VarDumper HTML fragment
WIDGET_PATTERN = re.compile(
    r"<pre\b[^>]*\bclass\s*=\s*[\"']?[^\"'>]*\bsf-dump\b",
    re.IGNORECASE,
)

# Namespaced class header such as ``App\Models\User {#123``
NAMESPACED_CLASS_PATTERN = re.compile(r"\b[A-Z]\w*(?:\\[A-Z]\w*)+\s*\{")

# ``#items: array:3 [`` or ``#name: Type``
PROPERTY_MARKER_PATTERN = re.compile(
    r"^\s*#\w+:\s*(?:array:\d+\s*\[|[A-Za-z_\\][\w\\]*)",
    re.MULTILINE,
)

# ``+"name": array:2 [`` or ``-owner: Foo\Bar {``
PROPERTY_TYPE_PATTERN = re.compile(
    r"^\s*[+\-]?\"?[\w-]+\"?:\s*(?:array:\d+\s*\[|[A-Z][\w\\]*\s*\{)",
    re.MULTILINE,
)

# ``0 => "first"``
INDEX_ARROW_PATTERN = re.compile(r"^\s*\d+\s*=>", re.MULTILINE)

INDENTED_DUMP_PATTERNS = (
    NAMESPACED_CLASS_PATTERN,
    PROPERTY_MARKER_PATTERN,
    PROPERTY_TYPE_PATTERN,
    INDEX_ARROW_PATTERN,
)


def decode_container(text: str) -> dict[str, Any] | list[Any] | None:
    """Decode text as a JSON object or array.

    Returns:
        The decoded container, or None if the text is not bracketed, does not
        decode, or decodes to a scalar. Nesting too deep for the decoder counts as
        not decoding.
    """
    stripped = text.strip()
    bracketed = (stripped.startswith("{") and stripped.endswith("}")) or (
        stripped.startswith("[") and stripped.endswith("]")
    )
    if not bracketed:
        return None
    try:
        value = json.loads(stripped)
    except (ValueError, RecursionError):
        return None
    if isinstance(value, (dict, list)):
        return value
    return None


def is_embedded_widget(text: str) -> bool:
    return WIDGET_PATTERN.search(text) is not None


def is_indented_dump(text: str) -> bool:
    return any(pattern.search(text) for pattern in INDENTED_DUMP_PATTERNS)


def classify(output: Any) -> FormatKind:
    """Pick the rendering strategy for a dump's output.

    Pure function of ``output``; non-string and empty output is plain text.
    """
    if not isinstance(output, str) or not output.strip():
        return FormatKind.PLAIN_TEXT
    if is_embedded_widget(output):
        return FormatKind.EMBEDDED_WIDGET
    if is_indented_dump(output):
        return FormatKind.INDENTED_DUMP
    if decode_container(output) is not None:
        return FormatKind.JSON
    return FormatKind.PLAIN_TEXT
