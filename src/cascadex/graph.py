"""Dependency graph — computed definitions and the edges into them.

Each computed property declares an ordered tuple of dependency names, which
may be raw properties or other computed properties. The relation must stay
acyclic; define() checks the new edges against the existing graph before
committing anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from cascadex.errors import CyclicDependencyError, DuplicateDefinitionError


@dataclass(frozen=True)
class Definition:
    """A registered computed property."""

    name: str
    dependencies: tuple[str, ...]
    derive: Callable[..., object]


class DependencyGraph:
    """Computed definitions plus forward and reverse edges."""

    def __init__(self) -> None:
        # Insertion order is definition order; evaluation_order relies on it.
        self._definitions: dict[str, Definition] = {}
        self._dependents: dict[str, set[str]] = {}

    def define(self, name: str, dependencies: Iterable[str], derive: Callable[..., object]) -> Definition:
        """Register a computed property. All-or-nothing."""
        if name in self._definitions:
            raise DuplicateDefinitionError(name, "computed")
        deps = tuple(dependencies)
        cycle = self._find_cycle(name, deps)
        if cycle:
            raise CyclicDependencyError(cycle)

        definition = Definition(name, deps, derive)
        self._definitions[name] = definition
        for dep in deps:
            self._dependents.setdefault(dep, set()).add(name)
        return definition

    def undefine(self, name: str) -> None:
        definition = self._definitions.pop(name)
        for dep in definition.dependencies:
            readers = self._dependents.get(dep)
            if readers is not None:
                readers.discard(name)
                if not readers:
                    del self._dependents[dep]

    def _find_cycle(self, name: str, deps: tuple[str, ...]) -> list[str] | None:
        """Path from name back to itself through deps, or None."""
        visited: set[str] = set()

        def visit(node: str, path: list[str]) -> list[str] | None:
            if node == name:
                return path + [node]
            if node in visited:
                return None
            visited.add(node)
            definition = self._definitions.get(node)
            if definition is None:
                return None
            for dep in definition.dependencies:
                found = visit(dep, path + [node])
                if found:
                    return found
            return None

        for dep in deps:
            found = visit(dep, [name])
            if found:
                return found
        return None

    def dependents_of(self, names: Iterable[str]) -> set[str]:
        """Computed names that read any of names, directly or transitively."""
        result: set[str] = set()
        stack = list(names)
        while stack:
            node = stack.pop()
            for reader in self._dependents.get(node, ()):
                if reader not in result:
                    result.add(reader)
                    stack.append(reader)
        return result

    def evaluation_order(self, names: Iterable[str]) -> tuple[str, ...]:
        """Topological order over names and their computed dependencies.

        Deterministic: requested names are visited in definition order and
        dependencies in declaration order.
        """
        requested = set(names)
        order: list[str] = []
        seen: set[str] = set()

        def visit(node: str) -> None:
            if node in seen:
                return
            seen.add(node)
            for dep in self._definitions[node].dependencies:
                if dep in self._definitions:
                    visit(dep)
            order.append(node)

        for name in self._definitions:
            if name in requested:
                visit(name)
        return tuple(order)

    def definition(self, name: str) -> Definition:
        return self._definitions[name]

    def dependencies(self, name: str) -> tuple[str, ...]:
        return self._definitions[name].dependencies

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        edges = ", ".join(f"{d.name}<-{list(d.dependencies)}" for d in self._definitions.values())
        return f"DependencyGraph({edges})"
