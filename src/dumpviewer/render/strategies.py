"""Per-format renderers that fill a panel's body.

The orchestrator dispatches on FormatKind through a table of these, one per
format. Each renderer sets exactly one of ``tree``, ``widget`` or ``text`` on
the panel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from dumpviewer.classify import decode_container
from dumpviewer.errors import TreeTooDeepError
from dumpviewer.models import DUMP_NAMESPACE, MAX_TREE_DEPTH, STRUCT_NAMESPACE, FormatKind
from dumpviewer.parsing.indented import IndentedDumpParser
from dumpviewer.render.values import ValueTreeRenderer
from dumpviewer.render.widget import EmbeddedWidget

if TYPE_CHECKING:
    from dumpviewer.render.view import PanelView
    from dumpviewer.state import OpenStateStore

log = logging.getLogger(__name__)


class DumpRenderer(Protocol):
    """Renders one dump's output into its panel."""

    def render(self, panel: PanelView) -> None: ...


class PlainTextRenderer:
    """Passes output through as text."""

    def render(self, panel: PanelView) -> None:
        output = panel.dump.output
        if output is None:
            panel.text = ""
        else:
            panel.text = output if isinstance(output, str) else str(output)


class JsonRenderer:
    """Decodes JSON output and builds a value tree under ``struct:<position>``."""

    def __init__(self, store: OpenStateStore) -> None:
        self._values = ValueTreeRenderer(store)
        self._fallback = PlainTextRenderer()

    def render(self, panel: PanelView) -> None:
        value = decode_container(panel.dump.output)
        if value is None:
            self._fallback.render(panel)
            return
        try:
            panel.tree = self._values.render(value, f"{STRUCT_NAMESPACE}{panel.position}")
        except TreeTooDeepError as e:
            log.debug("Dump %d shown as text: %s", panel.position, e)
            self._fallback.render(panel)


class IndentedDumpRenderer:
    """Parses the indentation dialect under ``dump:<position>``.

    Top-level collapsible nodes open the first time their path is seen, like
    JSON roots; every other node reads its state from the store. Blocks nested
    deeper than MAX_TREE_DEPTH are shown as text.
    """

    def __init__(self, store: OpenStateStore) -> None:
        self._store = store
        self._parser = IndentedDumpParser()
        self._fallback = PlainTextRenderer()

    def render(self, panel: PanelView) -> None:
        root = self._parser.parse(panel.dump.output, f"{DUMP_NAMESPACE}{panel.position}")
        # The synthetic root adds one level above the first dialect line
        if root.depth() > MAX_TREE_DEPTH + 1:
            log.debug(
                "Dump %d shown as text: nesting deeper than %d levels",
                panel.position,
                MAX_TREE_DEPTH,
            )
            self._fallback.render(panel)
            return
        root.open = True
        for top in root.children:
            for node in top.walk():
                if not node.collapsible:
                    continue
                if node is top:
                    node.open = self._store.setdefault(node.path, True)
                else:
                    node.open = self._store.is_open(node.path)
        panel.tree = root


class WidgetRenderer:
    """Embeds a VarDumper fragment; wiring happens after the render pass."""

    def render(self, panel: PanelView) -> None:
        panel.widget = EmbeddedWidget.from_markup(panel.dump.output)


def default_renderers(store: OpenStateStore) -> dict[FormatKind, DumpRenderer]:
    return {
        FormatKind.JSON: JsonRenderer(store),
        FormatKind.INDENTED_DUMP: IndentedDumpRenderer(store),
        FormatKind.EMBEDDED_WIDGET: WidgetRenderer(),
        FormatKind.PLAIN_TEXT: PlainTextRenderer(),
    }
