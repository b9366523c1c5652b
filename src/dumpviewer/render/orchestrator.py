"""Render orchestration: dump list in, stateful view tree out.

DumpViewer owns the state that must survive re-renders (OpenStateStore,
RefreshGate and the first-render flag) so that independent viewers never
share it. Every render pass rebuilds the whole tree from scratch and restores
open/closed state by path.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from dumpviewer.classify import classify
from dumpviewer.errors import UnknownNodeError, WidgetToggleError
from dumpviewer.models import Dump, FormatKind, ParseNode, dump_identity
from dumpviewer.render.strategies import DumpRenderer, default_renderers
from dumpviewer.render.view import PanelView, ViewTree
from dumpviewer.state import DEFAULT_COOLDOWN, OpenStateStore, RefreshGate

log = logging.getLogger(__name__)


class DumpViewer:
    """Turns dump lists into view trees and applies user toggles.

    Toggle "handlers" are the bindings collected after each pass: every
    collapsible node and every panel is reachable by key through ``toggle``,
    and every embedded widget through ``toggle_widget``. Both write back into
    the store (widgets excepted) and extend the refresh gate.
    """

    def __init__(
        self,
        cooldown: float = DEFAULT_COOLDOWN,
        clock: Callable[[], float] = time.monotonic,
        store: OpenStateStore | None = None,
        gate: RefreshGate | None = None,
    ) -> None:
        self.store = store or OpenStateStore()
        self.gate = gate or RefreshGate()
        self.cooldown = cooldown
        self.clock = clock
        self._renderers: dict[FormatKind, DumpRenderer] = default_renderers(self.store)
        self._first_render = True
        self._generation = 0
        self._view = ViewTree()
        self._bindings: dict[str, PanelView | ParseNode] = {}

    @property
    def view(self) -> ViewTree:
        """The most recently rendered view."""
        return self._view

    @property
    def first_render(self) -> bool:
        return self._first_render

    def register_renderer(self, kind: FormatKind, renderer: DumpRenderer) -> None:
        self._renderers[kind] = renderer

    def render(self, dumps: Sequence[Dump]) -> ViewTree:
        """Run one full render pass.

        The first dump of the first non-empty pass opens by default; that
        default is recorded so later passes keep it.
        """
        panels: list[PanelView] = []
        for position, dump in enumerate(dumps):
            identity = dump_identity(dump, position)
            kind = classify(dump.output)
            is_open = self.store.is_open(identity)
            if not is_open and self._first_render and position == 0:
                self.store.set_open(identity, True)
                is_open = True
            panel = PanelView(
                identity=identity,
                position=position,
                dump=dump,
                format=kind,
                open=is_open,
            )
            self._renderers[kind].render(panel)
            panels.append(panel)

        pruned = self.store.prune(panel.identity for panel in panels)
        if pruned:
            log.debug("Pruned %d stale panel keys", pruned)

        self._generation += 1
        view = ViewTree(panels=panels, generation=self._generation)
        self._bindings = self._wire(view)
        self._view = view

        if panels:
            self._first_render = False
        log.debug(
            "Rendered %d dumps (generation %d, %d toggles)",
            len(panels),
            self._generation,
            len(self._bindings),
        )
        return view

    def _wire(self, view: ViewTree) -> dict[str, PanelView | ParseNode]:
        bindings: dict[str, PanelView | ParseNode] = {}
        for panel in view.panels:
            bindings[panel.identity] = panel
            for node in panel.collapsible_nodes():
                bindings[node.path] = node
            if panel.widget is not None:
                panel.widget.wire()
        return bindings

    def toggle_keys(self) -> list[str]:
        """Keys accepted by ``toggle`` for the current view."""
        return list(self._bindings)

    def toggle(self, key: str, is_open: bool | None = None) -> bool:
        """Open, close or flip a panel or node of the current view.

        Setting a node to the state it already has is a no-op and does not
        extend the refresh gate.

        Args:
            key: Panel identity or node path
            is_open: Target state; None flips the current state

        Returns:
            The new state.

        Raises:
            UnknownNodeError: If the key is not collapsible in the current view.
        """
        target = self._bindings.get(key)
        if target is None:
            raise UnknownNodeError(key)
        if is_open is None:
            is_open = not target.open
        elif is_open == target.open:
            return is_open
        target.open = is_open
        self.store.set_open(key, is_open)
        self.touch()
        return is_open

    def toggle_widget(self, identity: str, index: int, recursive: bool = False) -> bool:
        """Toggle a region inside a panel's embedded widget.

        Raises:
            WidgetToggleError: If the panel has no widget or no such affordance.
        """
        panel = self._view.panel(identity)
        if panel is None or panel.widget is None:
            raise WidgetToggleError(f"No embedded widget in panel {identity!r}")
        try:
            expanded = panel.widget.toggle(index, recursive=recursive)
        except IndexError as e:
            raise WidgetToggleError(f"No toggle {index} in panel {identity!r}") from e
        self.touch()
        return expanded

    def touch(self) -> None:
        """Record a user interaction: suppress automatic refresh for a while."""
        self.gate.extend(self.clock(), self.cooldown)

    def refresh_blocked(self) -> bool:
        return self.gate.is_blocked(self.clock())

    def reset(self) -> None:
        """Return to the initial lifecycle state (after the dumps are cleared)."""
        self.store.reset()
        self.gate.reset()
        self._first_render = True
        self._bindings = {}
        self._view = ViewTree(generation=self._generation)
