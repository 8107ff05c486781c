"""Error taxonomy for cascadex.

Registration-time errors (cycles, duplicates, writes to computed names) fail
fast and leave no partial state. Observer failures are isolated per callback
and aggregated into one ObserverCallbackError raised after dispatch.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for every error raised by a Store."""


class ComputedPropertyWriteError(StoreError):
    """A raw write targeted a name registered as computed."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"cannot write computed properties: {', '.join(names)}")


class CyclicDependencyError(StoreError):
    """A computed definition would close a dependency cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"cyclic dependency: {' -> '.join(cycle)}")


class DuplicateDefinitionError(StoreError):
    """compute() was called for a name that already exists."""

    def __init__(self, name: str, kind: str) -> None:
        self.name = name
        self.kind = kind
        super().__init__(f"{name!r} is already a {kind} property")


class DerivationMutationError(StoreError):
    """A derive function tried to call set()."""


class ObserverCallbackError(StoreError):
    """One or more subscriber callbacks failed during a mutation cycle."""

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = errors
        summary = "; ".join(f"{type(e).__name__}: {e}" for e in errors)
        super().__init__(f"{len(errors)} observer callback(s) failed: {summary}")
