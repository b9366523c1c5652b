"""dumpviewer: collect diagnostic dumps and browse them as collapsible trees."""

__version__ = "0.1.0"

# Public API
from dumpviewer.classify import classify
from dumpviewer.config import Config, get_config, load_config
from dumpviewer.errors import (
    DumpViewerError,
    TransportError,
    UnknownNodeError,
    WidgetToggleError,
)
from dumpviewer.models import Dump, FormatKind, NodeKind, ParseNode
from dumpviewer.parsing import parse_indented_dump, stylize_label
from dumpviewer.refresh import RefreshLoop
from dumpviewer.render import DumpViewer, EmbeddedWidget, PanelView, ViewTree
from dumpviewer.state import OpenStateStore, RefreshGate
from dumpviewer.transport import DumpStore, HttpTransport, LocalTransport

__all__ = [
    # Main entry points
    "DumpViewer",
    "RefreshLoop",
    # Data model
    "Dump",
    "FormatKind",
    "NodeKind",
    "ParseNode",
    "PanelView",
    "ViewTree",
    "EmbeddedWidget",
    # Building blocks
    "classify",
    "parse_indented_dump",
    "stylize_label",
    "OpenStateStore",
    "RefreshGate",
    # Transports
    "DumpStore",
    "HttpTransport",
    "LocalTransport",
    # Config
    "Config",
    "load_config",
    "get_config",
    # Errors
    "DumpViewerError",
    "TransportError",
    "UnknownNodeError",
    "WidgetToggleError",
]
