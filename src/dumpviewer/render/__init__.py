"""Rendering: dump lists to view trees, and view trees to HTML or terminal output."""

from dumpviewer.render.orchestrator import DumpViewer
from dumpviewer.render.values import ValueTreeRenderer
from dumpviewer.render.view import PanelView, ViewTree, format_timestamp
from dumpviewer.render.widget import EmbeddedWidget, adapt_widget

__all__ = [
    "DumpViewer",
    "EmbeddedWidget",
    "PanelView",
    "ValueTreeRenderer",
    "ViewTree",
    "adapt_widget",
    "format_timestamp",
]
