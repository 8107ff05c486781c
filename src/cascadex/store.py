"""Store — the public facade over state, graph, engine and observers.

Every mutation enters through set(). One call is one mutation cycle:
raw write -> recompute affected computed properties -> notify observers once
with the union of everything that changed.

Thread safety: call set_scheduler() once from the owning thread. After that,
any set() from another thread is marshaled through the scheduler. Calls on
the owning thread stay synchronous.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, Mapping

from cascadex._cycle import MutationCycle
from cascadex.computed import ComputationEngine
from cascadex.errors import DerivationMutationError, DuplicateDefinitionError, ObserverCallbackError
from cascadex.graph import DependencyGraph
from cascadex.observers import ObserverRegistry, Subscription
from cascadex.state import StateTable

logger = logging.getLogger("cascadex.store")

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler) -> None:
    """Set the global thread scheduler for cross-thread Store mutations.

    Call once from the owning/UI thread:
        cascadex.set_scheduler(app.call_from_thread)

    Pass None to go back to direct, unmarshaled writes.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


class Store:
    """Flat reactive property map with computed properties and observers."""

    def __init__(self, state: Mapping[str, object] | None = None) -> None:
        self._graph = DependencyGraph()
        self._table = StateTable(state, computed=self._graph)
        self._engine = ComputationEngine(self._table, self._graph)
        self._observers = ObserverRegistry()
        self._cycle = MutationCycle()

    # --- Reads ---

    def get(self, name: str, default: object = None) -> object:
        return self._table.get(name, default)

    def get_all(self) -> dict[str, object]:
        """Snapshot of every raw and computed property."""
        return self._table.snapshot()

    def __contains__(self, name: object) -> bool:
        return name in self._table

    def is_computed(self, name: str) -> bool:
        return name in self._graph

    # --- Writes ---

    def set(self, patch: Mapping[str, object] | None = None, /, **values: object) -> None:
        """Apply patch (and/or keyword values) as one mutation cycle."""
        merged = dict(patch) if patch else {}
        merged.update(values)
        if _scheduler is not None and threading.current_thread() != _scheduler_thread:
            _scheduler(lambda p=merged: self._set_direct(p))
        else:
            self._set_direct(merged)

    def _set_direct(self, patch: dict[str, object]) -> None:
        if self._engine.evaluating:
            raise DerivationMutationError(
                f"set({', '.join(patch)}) called from inside a derive function"
            )
        self._table.check_writable(patch)
        if self._cycle.flushing:
            # Re-entrant write from an observer: becomes its own cycle later.
            logger.debug("Queued re-entrant patch: %s", ", ".join(patch))
            self._cycle.enqueue(patch)
            return
        self._cycle.depth += 1
        try:
            self._apply(patch)
        finally:
            self._end()

    def _apply(self, patch: Mapping[str, object]) -> dict[str, object]:
        """Raw write plus cascade. Restores the table if a derive function fails."""
        before = self._table.snapshot()
        try:
            changes = self._table.apply_raw(patch)
            if changes:
                changes.update(self._engine.recompute(changes))
        except Exception:
            self._table.restore(before)
            raise
        self._cycle.record(changes, before)
        return changes

    def _end(self) -> None:
        self._cycle.depth -= 1
        if self._cycle.idle:
            self._flush()

    def _flush(self) -> None:
        """Dispatch pending changes, then drain queued patches cycle by cycle."""
        cycle = self._cycle
        cycle.flushing = True
        errors: list[Exception] = []
        try:
            while True:
                changes = cycle.take()
                if changes:
                    logger.debug("Cycle changed: %s", ", ".join(changes))
                    errors.extend(self._observers.dispatch(changes, self._table.snapshot()))
                if cycle.has_pending:
                    # A compute() from a callback refreshed readers mid-dispatch.
                    continue
                patch = cycle.next_patch()
                if patch is None:
                    break
                try:
                    self._apply(patch)
                except Exception as exc:
                    logger.exception("Queued patch failed: %s", ", ".join(patch))
                    errors.append(exc)
        finally:
            cycle.flushing = False
        if errors:
            raise ObserverCallbackError(errors) from errors[0]

    @contextmanager
    def transaction(self) -> Iterator[Store]:
        """Batch several set() calls into one notification.

        Usage:
            with store.transaction():
                store.set(width=2)
                store.set(height=3)
                # observers fire here, once, after both writes
        """
        self._cycle.depth += 1
        try:
            yield self
        finally:
            self._end()

    # --- Computed properties ---

    def compute(self, name: str, dependencies: Iterable[str], derive: Callable[..., object]) -> None:
        """Define a computed property and evaluate it against the current state.

        The initial value of name itself does not notify observers. Computed
        properties that already listed name as a dependency are refreshed,
        and their changes go out as a regular cycle.
        """
        if name in self._table and name not in self._graph:
            raise DuplicateDefinitionError(name, "raw")
        self._graph.define(name, dependencies, derive)
        before = self._table.snapshot()
        self._cycle.depth += 1
        try:
            try:
                self._engine.evaluate(name)
                readers = self._engine.recompute([name])
            except Exception:
                self._table.restore(before)
                self._graph.undefine(name)
                raise
            self._cycle.record(readers, before)
            logger.debug("Defined %r <- %s", name, list(self._graph.dependencies(name)))
        finally:
            self._end()

    def computed(self, name: str, dependencies: Iterable[str]) -> Callable:
        """Decorator form of compute().

        Usage:
            @store.computed("area", ["width", "height"])
            def area(width, height):
                return width * height
        """

        def decorator(fn: Callable[..., object]) -> Callable[..., object]:
            self.compute(name, dependencies, fn)
            return fn

        return decorator

    # --- Observers ---

    def observe(self, name: str, callback: Callable[[object], None], *, init: bool = True) -> Subscription:
        """Call callback(value) now and whenever name changes."""
        sub = self._observers.observe(name, callback)
        if init:
            try:
                callback(self._table.get(name))
            except Exception:
                sub.dispose()
                raise
        return sub

    def onchange(self, callback: Callable[[dict, dict], None]) -> Subscription:
        """Call callback(state, changes) once per cycle with a non-empty change set."""
        return self._observers.onchange(callback)

    def dispose(self) -> None:
        """Cancel every subscription."""
        self._observers.clear()

    def __repr__(self) -> str:
        return (
            f"Store({len(self._table)} properties, {len(self._graph)} computed, "
            f"{self._observers.count()} onchange handlers)"
        )
