"""Viewer state that survives re-renders.

This module defines:
- OpenStateStore: path-keyed expanded/collapsed table
- RefreshGate: cool-down latch that suppresses automatic refresh after
  user interaction
"""

from __future__ import annotations

from collections.abc import Iterable

from dumpviewer.models import PANEL_PREFIX

# Seconds automatic refresh stays suppressed after a toggle
DEFAULT_COOLDOWN = 5.0


class OpenStateStore:
    """Maps panel identities and node paths to an expanded flag.

    Panel keys (``panel:`` prefix) are pruned to the current dump list on
    every render pass. Node paths are kept for the lifetime of the store;
    stale ones never match a future path.
    """

    def __init__(self) -> None:
        self._state: dict[str, bool] = {}

    def is_open(self, key: str, default: bool = False) -> bool:
        return self._state.get(key, default)

    def set_open(self, key: str, is_open: bool) -> None:
        self._state[key] = is_open

    def setdefault(self, key: str, is_open: bool) -> bool:
        """Record ``is_open`` for a key seen for the first time.

        Returns:
            The stored value, which is the existing one if the key was known.
        """
        return self._state.setdefault(key, is_open)

    def prune(self, valid_keys: Iterable[str]) -> int:
        """Drop panel keys not in ``valid_keys``. Node paths are untouched.

        Returns:
            Number of keys removed.
        """
        keep = set(valid_keys)
        stale = [k for k in self._state if k.startswith(PANEL_PREFIX) and k not in keep]
        for key in stale:
            del self._state[key]
        return len(stale)

    def reset(self) -> None:
        self._state.clear()

    def snapshot(self) -> dict[str, bool]:
        return dict(self._state)

    def __contains__(self, key: object) -> bool:
        return key in self._state

    def __len__(self) -> int:
        return len(self._state)


class RefreshGate:
    """A deadline before which automatic refresh is skipped.

    Times are in seconds on whatever clock the caller uses (the viewer uses
    ``time.monotonic``).
    """

    def __init__(self) -> None:
        self._deadline: float | None = None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    def extend(self, now: float, cooldown: float = DEFAULT_COOLDOWN) -> None:
        self._deadline = now + cooldown

    def is_blocked(self, now: float) -> bool:
        return self._deadline is not None and now <= self._deadline

    def reset(self) -> None:
        self._deadline = None
