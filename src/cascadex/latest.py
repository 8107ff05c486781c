"""Last-writer-wins guards for asynchronous store operations.

An operation that awaits something before calling set() can be overtaken by
a newer call of itself. Whichever call *started* last owns the result; an
older call that resolves afterwards must drop its patch. The Store knows
nothing about this. It lives entirely above the facade.
"""

from __future__ import annotations

import functools
import itertools
from typing import Awaitable, Callable, Mapping

from cascadex.store import Store

Patch = Mapping[str, object]


class Ticket:
    """Call-start token handed out by LatestGuard.begin()."""

    __slots__ = ("_guard", "_number")

    def __init__(self, guard: LatestGuard, number: int) -> None:
        self._guard = guard
        self._number = number

    @property
    def stale(self) -> bool:
        """True once a newer call has started."""
        return self._number != self._guard._latest

    def commit(self, store: Store, patch: Patch | None) -> bool:
        """set(patch) on store unless stale. Returns whether the patch was applied."""
        if self.stale or not patch:
            return False
        store.set(patch)
        return True

    def __repr__(self) -> str:
        return f"Ticket({self._number}, {'stale' if self.stale else 'current'})"


class LatestGuard:
    """Orders calls of one logical operation by their start time.

    Usage:
        guard = LatestGuard()

        async def search(query):
            ticket = guard.begin()
            results = await fetch(query)
            ticket.commit(store, {"results": results})
    """

    __slots__ = ("_counter", "_latest")

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0

    def begin(self) -> Ticket:
        self._latest = next(self._counter)
        return Ticket(self, self._latest)


def latest(fn: Callable[..., Awaitable[Patch | None]]) -> Callable[..., Awaitable[bool]]:
    """Decorator for async Actions methods that return a patch.

    The returned patch is applied to self.store only if no newer call of the
    same method on the same instance started while this one was suspended.
    The wrapper resolves to True when the patch was applied.

    Usage:
        class Search(Actions):
            @latest
            async def run(self, query):
                return {"results": await fetch(query)}
    """
    attr = f"_latest_guard_{fn.__name__}"

    @functools.wraps(fn)
    async def wrapper(self, *args, **kwargs) -> bool:
        guard = self.__dict__.get(attr)
        if guard is None:
            guard = self.__dict__[attr] = LatestGuard()
        ticket = guard.begin()
        patch = await fn(self, *args, **kwargs)
        return ticket.commit(self.store, patch)

    return wrapper
