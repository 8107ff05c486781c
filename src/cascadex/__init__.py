"""cascadex: a reactive property store with computed values and observers."""

from importlib.metadata import version as _version

__version__ = _version("cascadex")

from cascadex.errors import (
    StoreError,
    ComputedPropertyWriteError,
    CyclicDependencyError,
    DuplicateDefinitionError,
    DerivationMutationError,
    ObserverCallbackError,
)
from cascadex.state import StateTable, differs
from cascadex.graph import DependencyGraph, Definition
from cascadex.computed import ComputationEngine
from cascadex.observers import ObserverRegistry, Subscription
from cascadex.store import Store, set_scheduler
from cascadex.action import Actions, action
from cascadex.latest import LatestGuard, Ticket, latest
# debug and textual NOT auto-imported — opt-in only

__all__ = [
    "Store",
    "set_scheduler",
    "Subscription",
    "Actions",
    "action",
    "latest",
    "LatestGuard",
    "Ticket",
    "StateTable",
    "differs",
    "DependencyGraph",
    "Definition",
    "ComputationEngine",
    "ObserverRegistry",
    "StoreError",
    "ComputedPropertyWriteError",
    "CyclicDependencyError",
    "DuplicateDefinitionError",
    "DerivationMutationError",
    "ObserverCallbackError",
]
