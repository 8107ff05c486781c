"""Mutation cycle bookkeeping — batching and the re-entrant patch queue.

Batching: writes inside a transaction (or a plain set()) accumulate into one
pending change set, flushed once when the outermost scope exits.

Re-entrancy: a set() issued while a flush is dispatching is not applied on
the spot. Its patch is queued and drained as a separate cycle once the
current dispatch is over, so no observer ever sees a partial change set.
"""

from __future__ import annotations

from collections import deque
from typing import Mapping

from cascadex.state import MISSING, differs


class MutationCycle:
    """Per-store batch depth, pending changes and queued patches."""

    __slots__ = ("depth", "flushing", "_pending", "_origin", "_queue")

    def __init__(self) -> None:
        self.depth = 0
        self.flushing = False
        self._pending: dict[str, object] = {}
        # Value each pending name held before the batch started.
        self._origin: dict[str, object] = {}
        self._queue: deque[dict[str, object]] = deque()

    @property
    def idle(self) -> bool:
        return self.depth == 0 and not self.flushing

    def record(self, changes: Mapping[str, object], before: Mapping[str, object]) -> None:
        """Merge one applied write into the pending change set."""
        for name, value in changes.items():
            if name not in self._origin:
                self._origin[name] = before.get(name, MISSING)
            self._pending[name] = value

    def take(self) -> dict[str, object]:
        """Pop the pending change set, dropping primitives that ended unchanged."""
        changes = {
            name: value
            for name, value in self._pending.items()
            if differs(self._origin[name], value)
        }
        self._pending.clear()
        self._origin.clear()
        return changes

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def enqueue(self, patch: dict[str, object]) -> None:
        self._queue.append(patch)

    def next_patch(self) -> dict[str, object] | None:
        return self._queue.popleft() if self._queue else None
