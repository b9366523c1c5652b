"""Core data types: dumps, format kinds and parse nodes.

A Dump is the unit of input received from a producer. ParseNode is the
structural unit produced by both the indentation-dialect parser and the JSON
value renderer; its ``path`` is the stable key used for open/closed state.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Key namespaces. Panel keys are pruned every render pass, node paths never are.
PANEL_PREFIX = "panel:"
STRUCT_NAMESPACE = "struct:"
DUMP_NAMESPACE = "dump:"

# Trees nested deeper than this render as plain text
MAX_TREE_DEPTH = 64


class Dump(BaseModel):
    """One timestamped block of debug output.

    The wire form uses ``type`` for the category, matching what producers send.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str | int | float = ""
    output: Any = ""
    file: str | None = None
    line: int | None = None
    category: str | None = Field(default=None, alias="type")

    @property
    def location(self) -> str | None:
        """``file:line`` when the producer reported a source location."""
        if not self.file:
            return None
        if self.line is None:
            return self.file
        return f"{self.file}:{self.line}"

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON shape producers post."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def dump_identity(dump: Dump, position: int) -> str:
    """Derive the outer-panel state key for a dump at a list position."""
    line = "" if dump.line is None else str(dump.line)
    return f"{PANEL_PREFIX}{dump.timestamp}|{dump.file or ''}|{line}|{position}"


class FormatKind(Enum):
    """Rendering strategy chosen for a dump's output."""

    JSON = "json"
    INDENTED_DUMP = "indented_dump"
    EMBEDDED_WIDGET = "embedded_widget"
    PLAIN_TEXT = "plain_text"

    def __str__(self) -> str:
        return self.value


class NodeKind(Enum):
    """Tag distinguishing parse node flavours."""

    ROOT = "root"
    # Indentation dialect
    CLASS_HEADER = "class"
    PROPERTY = "property"
    ARRAY_ELEMENT = "element"
    OBJECT_PROPERTY = "key"
    CONTENT = "content"
    # JSON dialect
    OBJECT = "object"
    ARRAY = "array"
    SCALAR = "scalar"

    def __str__(self) -> str:
        return self.value


@dataclass
class ParseNode:
    """A node of a parsed dump tree.

    Attributes:
        kind: Node flavour
        label: Raw line text (indentation dialect); empty for JSON nodes
        value: Scalar value for JSON leaves
        children: Child nodes in order
        path: Structural address, stable across re-parses of equivalent input
        key: Property name or array index a JSON node sits under
        summary: Collapsed-state summary (``"4 items"``), or ``{}``/``[]`` for
            empty containers
        inline: Rendered fully expanded without a toggle
        open: Current expanded state
    """

    kind: NodeKind
    label: str = ""
    value: Any = None
    children: list[ParseNode] = field(default_factory=list)
    path: str = ""
    key: str | int | None = None
    summary: str = ""
    inline: bool = False
    open: bool = False

    @property
    def collapsible(self) -> bool:
        """Leaves, inline containers and synthetic roots never carry a toggle."""
        return bool(self.children) and not self.inline and self.kind is not NodeKind.ROOT

    def walk(self) -> Iterator[ParseNode]:
        """Yield this node and all descendants depth-first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def depth(self) -> int:
        """Number of levels below this node (0 for a leaf)."""
        deepest = 0
        stack = [(self, 0)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest

    def find(self, path: str) -> ParseNode | None:
        """Find a descendant (or self) by path."""
        for node in self.walk():
            if node.path == path:
                return node
        return None
