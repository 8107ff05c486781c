"""Process-wide debug handles for stores. Opt-in — nothing in the Store uses it.

Handy from a REPL or debugger attached to a running app:
    from cascadex import debug
    debug.lookup("store").get_all()
"""

import logging

logger = logging.getLogger("cascadex.debug")

# Module-owned registry: name -> store. Entries live until conceal()/clear().
_exposed: dict[str, object] = {}


def expose(store, name: str = "store"):
    """Register store under name, replacing any previous holder. Returns store."""
    previous = _exposed.get(name)
    if previous is not None and previous is not store:
        logger.warning("Debug handle %r replaced", name)
    _exposed[name] = store
    logger.debug("Exposed %r as %r", store, name)
    return store


def lookup(name: str = "store"):
    """Store registered under name, or None."""
    return _exposed.get(name)


def conceal(name: str = "store") -> None:
    _exposed.pop(name, None)


def exposed() -> dict:
    """Copy of the registry."""
    return dict(_exposed)


def clear() -> None:
    _exposed.clear()
