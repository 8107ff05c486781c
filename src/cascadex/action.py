"""Custom actions — named operations layered on top of a Store.

An Actions subclass holds a Store, it does not extend it. Its methods can
only reach state through get() and set(), so every write still goes through
the single mutation entry point and notifies observers as usual.

Wrapping a method in @action runs it inside store.transaction(): however
many set() calls it makes, observers see one merged change set when the
outermost action returns.
"""

from __future__ import annotations

import functools
from typing import TypeVar, Callable, Concatenate, Mapping, ParamSpec

from cascadex.store import Store

P = ParamSpec("P")
R = TypeVar("R")
A = TypeVar("A", bound="Actions")


class Actions:
    """Base for store-bound operations.

    Usage:
        class Counter(Actions):
            @action
            def increment(self, by=1):
                self.set(count=self.get("count") + by)

        counter = Counter(Store({"count": 0}))
        counter.increment()
    """

    def __init__(self, store: Store) -> None:
        self.store = store

    def get(self, name: str, default: object = None) -> object:
        return self.store.get(name, default)

    def set(self, patch: Mapping[str, object] | None = None, /, **values: object) -> None:
        self.store.set(patch, **values)


def action(fn: Callable[Concatenate[A, P], R]) -> Callable[Concatenate[A, P], R]:
    """Decorator: batch all store writes made by an Actions method.

    Usage:
        class Cart(Actions):
            @action
            def checkout(self):
                self.set(items=[])
                self.set(total=0)
                # observers see items and total change together
    """

    @functools.wraps(fn)
    def wrapper(self: A, *args: P.args, **kwargs: P.kwargs) -> R:
        with self.store.transaction():
            return fn(self, *args, **kwargs)

    return wrapper
