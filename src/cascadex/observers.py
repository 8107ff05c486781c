"""Observer registry — per-property subscribers and whole-state handlers.

dispatch() never stops early: a failing callback is logged and collected,
the remaining callbacks still run, and the caller receives the failures to
raise once the pass is over.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping

logger = logging.getLogger("cascadex.observers")


class Subscription:
    """Handle for one registered callback. dispose() cancels it."""

    __slots__ = ("_registry", "_key", "_callback", "_active")

    def __init__(self, registry: ObserverRegistry, key: str | None, callback: Callable) -> None:
        self._registry = registry
        self._key = key
        self._callback = callback
        self._active = True

    @property
    def key(self) -> str | None:
        """Observed property name, or None for an onchange handler."""
        return self._key

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        if self._active:
            self._active = False
            self._registry._remove(self)

    def __repr__(self) -> str:
        state = "active" if self._active else "disposed"
        name = getattr(self._callback, "__name__", repr(self._callback))
        return f"Subscription({self._key!r}, {name}, {state})"


class ObserverRegistry:
    """Owns every subscription of one Store."""

    def __init__(self) -> None:
        self._subscriptions: dict[str | None, list[Subscription]] = {}

    def observe(self, name: str, callback: Callable[[object], None]) -> Subscription:
        return self._add(name, callback)

    def onchange(self, callback: Callable[[dict, dict], None]) -> Subscription:
        return self._add(None, callback)

    def _add(self, key: str | None, callback: Callable) -> Subscription:
        sub = Subscription(self, key, callback)
        self._subscriptions.setdefault(key, []).append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscriptions.get(sub.key)
        if subs is None:
            return
        try:
            subs.remove(sub)
        except ValueError:
            pass  # already removed
        if not subs:
            del self._subscriptions[sub.key]

    def count(self, name: str | None = None) -> int:
        return len(self._subscriptions.get(name, ()))

    def dispatch(self, changes: Mapping[str, object], state: Mapping[str, object]) -> list[Exception]:
        """Deliver one cycle's changes. Returns the callback failures."""
        errors: list[Exception] = []
        for name, value in changes.items():
            for sub in list(self._subscriptions.get(name, ())):
                self._call(sub, errors, value)
        for sub in list(self._subscriptions.get(None, ())):
            self._call(sub, errors, dict(state), dict(changes))
        return errors

    def _call(self, sub: Subscription, errors: list[Exception], *args) -> None:
        if not sub.active:
            return
        try:
            sub._callback(*args)
        except Exception as exc:
            logger.exception("Observer callback for %r failed", sub.key)
            errors.append(exc)

    def clear(self) -> None:
        for subs in list(self._subscriptions.values()):
            for sub in subs:
                sub._active = False
        self._subscriptions.clear()
