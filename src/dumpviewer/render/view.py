"""View tree emitted by the render orchestrator.

A ViewTree is an ordered list of PanelViews (one per dump). Each panel holds
exactly one body: a ParseNode tree (JSON or indentation dialect), an
EmbeddedWidget, or plain text. ``to_dict`` gives the JSON form a host UI lays
out; node ``type`` is ``toggle`` for collapsible nodes, ``container`` for
inline containers and ``content`` for leaves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from dumpviewer.models import Dump, FormatKind, NodeKind, ParseNode
from dumpviewer.parsing.labels import clean_label, stylize_label
from dumpviewer.render.values import scalar_text

if TYPE_CHECKING:
    from dumpviewer.render.widget import EmbeddedWidget

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(timestamp: str | int | float) -> str:
    """Human-readable local time for a dump timestamp.

    Numbers are epoch milliseconds (what browser producers send) when they
    are too large to be seconds. Unparseable strings are returned unchanged.
    """
    try:
        if isinstance(timestamp, (int, float)):
            seconds = timestamp / 1000 if timestamp > 1e11 else timestamp
            moment = datetime.fromtimestamp(seconds)
        else:
            moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
            if moment.tzinfo is not None:
                moment = moment.astimezone()
    except (ValueError, OverflowError, OSError):
        return str(timestamp)
    return moment.strftime(TIMESTAMP_FORMAT)


def node_to_dict(node: ParseNode) -> dict[str, Any]:
    """Serialize a parse node for the host UI."""
    if node.collapsible:
        node_type = "toggle"
    elif node.children:
        node_type = "container"
    else:
        node_type = "content"

    data: dict[str, Any] = {
        "type": node_type,
        "kind": node.kind.value,
        "path": node.path,
        "open": node.open if node.children else False,
    }
    if node.kind in (NodeKind.OBJECT, NodeKind.ARRAY, NodeKind.SCALAR):
        data["key"] = node.key
        if node.kind is NodeKind.SCALAR:
            data["value"] = scalar_text(node.value)
        else:
            data["summary"] = node.summary
    elif node.kind is not NodeKind.ROOT:
        data["label"] = node.label
        data["text"] = clean_label(node.label)
        data["markup"] = stylize_label(node.label)
    if node.children:
        data["children"] = [node_to_dict(child) for child in node.children]
    return data


@dataclass
class PanelView:
    """The outer collapsible panel for one dump."""

    identity: str
    position: int
    dump: Dump
    format: FormatKind
    open: bool = False
    tree: ParseNode | None = None
    widget: EmbeddedWidget | None = None
    text: str | None = None

    @property
    def title(self) -> str:
        return format_timestamp(self.dump.timestamp)

    def collapsible_nodes(self) -> list[ParseNode]:
        if self.tree is None:
            return []
        return [node for node in self.tree.walk() if node.collapsible]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": "container",
            "identity": self.identity,
            "position": self.position,
            "timestamp": self.dump.timestamp,
            "title": self.title,
            "file": self.dump.file,
            "line": self.dump.line,
            "category": self.dump.category,
            "format": self.format.value,
            "open": self.open,
        }
        if self.tree is not None:
            data["tree"] = node_to_dict(self.tree)
        if self.widget is not None:
            data["markup"] = self.widget.to_html()
            data["toggles"] = len(self.widget)
        if self.text is not None:
            data["text"] = self.text
        return data


@dataclass
class ViewTree:
    """Result of one render pass."""

    panels: list[PanelView] = field(default_factory=list)
    generation: int = 0

    @property
    def empty(self) -> bool:
        return not self.panels

    def panel(self, identity: str) -> PanelView | None:
        for panel in self.panels:
            if panel.identity == identity:
                return panel
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation": self.generation,
            "count": len(self.panels),
            "panels": [panel.to_dict() for panel in self.panels],
        }
