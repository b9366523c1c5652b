"""Parser for the indentation-based object dump dialect.

The dialect is the pretty-printed form produced by VarDumper-style tools:

    App\\Models\\User {#1234
      #attributes: array:2 [
        "id" => 1
        "name" => "Taylor"
      ]
      +exists: true
    }

Structure is carried by 2-space indentation. Closing and lone opening
brackets are noise; the parser never fails, inconsistent indentation only
produces a flatter tree.
"""

from __future__ import annotations

import re

from dumpviewer.models import DUMP_NAMESPACE, NodeKind, ParseNode


class IndentedDumpParser:
    """Stack-based parser producing a ParseNode tree.

    Each line's depth is ``leading_spaces // INDENT_WIDTH``. The stack holds
    the open ancestors with their depths; a line pops every ancestor at the
    same depth or deeper and attaches to the one left on top. A line becomes
    an ancestor (is collapsible) only when the next significant line is
    strictly deeper.
    """

    INDENT_WIDTH = 2

    # Lone opening/closing bracket or brace, optionally comma-suffixed
    NOISE_PATTERN = re.compile(r"^[\[\]{}],?$")

    # ``App\Models\User {#1`` or ``stdClass {#2``
    CLASS_HEADER_PATTERN = re.compile(r"^[A-Za-z_][\w\\]*\s*\{")

    # ``#name:``, ``+"name":``, ``-name:``
    PROPERTY_PATTERN = re.compile(r"^[#+\-]\"?[\w-]+\"?:")

    # ``0 =>``
    ARRAY_ELEMENT_PATTERN = re.compile(r"^\d+\s*=>")

    # ``"key" =>``
    OBJECT_PROPERTY_PATTERN = re.compile(r'^"[^"]*"\s*=>')

    def line_kind(self, content: str) -> NodeKind:
        """Classify a stripped line."""
        if self.CLASS_HEADER_PATTERN.match(content):
            return NodeKind.CLASS_HEADER
        if self.PROPERTY_PATTERN.match(content):
            return NodeKind.PROPERTY
        if self.ARRAY_ELEMENT_PATTERN.match(content):
            return NodeKind.ARRAY_ELEMENT
        if self.OBJECT_PROPERTY_PATTERN.match(content):
            return NodeKind.OBJECT_PROPERTY
        return NodeKind.CONTENT

    def significant_lines(self, text: str) -> list[tuple[int, str]]:
        """Return ``(depth, stripped_content)`` for every non-noise line."""
        lines: list[tuple[int, str]] = []
        for raw in text.expandtabs(self.INDENT_WIDTH).split("\n"):
            line = raw.rstrip()
            content = line.lstrip(" ")
            if not content or self.NOISE_PATTERN.match(content):
                continue
            depth = (len(line) - len(content)) // self.INDENT_WIDTH
            lines.append((depth, content))
        return lines

    def parse(self, text: str, base_path: str = DUMP_NAMESPACE) -> ParseNode:
        """Parse dialect text into a tree.

        Args:
            text: Text already classified as the indentation dialect
            base_path: Path of the synthetic root; children extend it with
                their ordinal (``/0``, ``/1``, ...)

        Returns:
            Synthetic root node whose children are the top-level lines
        """
        root = ParseNode(kind=NodeKind.ROOT, path=base_path)
        lines = self.significant_lines(text)
        stack: list[tuple[int, ParseNode]] = [(-1, root)]

        for index, (depth, content) in enumerate(lines):
            while len(stack) > 1 and stack[-1][0] >= depth:
                stack.pop()
            parent = stack[-1][1]

            node = ParseNode(
                kind=self.line_kind(content),
                label=content,
                path=f"{parent.path}/{len(parent.children)}",
            )
            parent.children.append(node)

            if index + 1 < len(lines) and lines[index + 1][0] > depth:
                stack.append((depth, node))

        return root


def parse_indented_dump(text: str, base_path: str = DUMP_NAMESPACE) -> ParseNode:
    """Convenience function to parse indentation-dialect text."""
    return IndentedDumpParser().parse(text, base_path)
