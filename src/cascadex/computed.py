"""Computation engine — keeps computed properties consistent with their inputs.

Computed values are eager here: a mutation cycle recomputes every affected
property, in topological order, before any observer hears about the change.
A property is re-derived only when one of its dependencies actually changed
in the current cycle.
"""

from __future__ import annotations

from typing import Iterable

from cascadex.graph import DependencyGraph
from cascadex.state import MISSING, StateTable, differs


class ComputationEngine:
    """Evaluates computed properties and writes results into the state table."""

    def __init__(self, table: StateTable, graph: DependencyGraph) -> None:
        self._table = table
        self._graph = graph
        self._depth = 0

    @property
    def evaluating(self) -> bool:
        """True while a derive function is running."""
        return self._depth > 0

    def _derive(self, name: str) -> object:
        definition = self._graph.definition(name)
        args = [self._table.get(dep) for dep in definition.dependencies]
        self._depth += 1
        try:
            return definition.derive(*args)
        finally:
            self._depth -= 1

    def evaluate(self, name: str) -> object:
        """Initial evaluation of a freshly defined property. No notification."""
        value = self._derive(name)
        self._table.write(name, value)
        return value

    def recompute(self, changed_raw: Iterable[str]) -> dict[str, object]:
        """Recompute everything downstream of changed_raw.

        Returns the computed entries whose value changed, in evaluation order.
        """
        dirty = set(changed_raw)
        affected = self._graph.dependents_of(dirty)
        changed: dict[str, object] = {}
        for name in self._graph.evaluation_order(affected):
            if name not in affected:
                continue
            if dirty.isdisjoint(self._graph.dependencies(name)):
                continue
            old = self._table.get(name, MISSING)
            value = self._derive(name)
            self._table.write(name, value)
            if differs(old, value):
                dirty.add(name)
                changed[name] = value
        return changed
