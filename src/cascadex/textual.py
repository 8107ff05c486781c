"""Textual integration for cascadex. Opt-in — requires textual.

Guards, NoMatches handling and thread marshaling are enforced here, not at
every widget callsite. Textual coupling stays in this module, the core Store
knows nothing about widgets.
"""

import threading
from contextlib import contextmanager

from textual.css.query import NoMatches

# Module-owned pause state, keyed by id(app) so multiple apps work in tests.
# An id is present exactly while its app is inside a pause() block.
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend guarded callbacks during widget replacement."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    """Is the widget tree in a queryable state?"""
    return app.is_running and id(app) not in _paused_apps


def _guard(app, fn):
    """Wrap fn so it only touches widgets when the app can take it."""
    _main = threading.get_ident()

    def _safe(*args):
        try:
            fn(*args)
        except NoMatches:
            pass

    def _guarded(*args):
        if not is_safe(app):
            return
        if threading.get_ident() != _main:
            app.call_from_thread(_safe, *args)
        else:
            _safe(*args)

    return _guarded


def observe(app, store, name, callback, *, init=True):
    """store.observe() that safely bridges to Textual widgets.

    Usage:
        stx.observe(app, store, "volume", lambda v: app.query_one("#volume").update(str(v)))
    """
    return store.observe(name, _guard(app, callback), init=init)


def onchange(app, store, callback):
    """store.onchange() that safely bridges to Textual widgets."""
    return store.onchange(_guard(app, callback))
