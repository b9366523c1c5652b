"""Exception types raised by dumpviewer."""

from __future__ import annotations


class DumpViewerError(Exception):
    """Base class for all dumpviewer errors."""


class TransportError(DumpViewerError):
    """Fetching or clearing the dump list failed.

    Raised by transports; the refresh loop logs it and keeps the previous view.
    """


class UnknownNodeError(DumpViewerError, KeyError):
    """A toggle referenced a key that is not collapsible in the current view."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"No collapsible node with key {self.key!r} in the current view"


class WidgetToggleError(DumpViewerError):
    """A widget toggle referenced a missing panel or affordance index."""


class TreeTooDeepError(DumpViewerError):
    """A decoded value nests deeper than the renderer follows.

    Renderers catch it and show the dump as plain text instead.
    """

    def __init__(self, depth: int) -> None:
        super().__init__(f"Nesting deeper than {depth} levels")
        self.depth = depth
