"""State table — the authoritative property map and its shallow diff.

Raw properties are written through apply_raw(); computed properties are
written only by the computation engine through write(). Reads hand out a
fresh top-level copy so callers can never mutate the table by accident.
"""

from __future__ import annotations

import math
from typing import Container, Mapping

from cascadex.errors import ComputedPropertyWriteError

MISSING = object()

# Compared by value. Anything else is treated as changed whenever it is set.
_PRIMITIVES = (type(None), bool, int, float, complex, str, bytes)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def differs(old: object, new: object) -> bool:
    """Conservative change check.

    Primitives compare by value. Numbers compare across int and float
    (1 == 1.0) and NaN equals NaN; any other type change, such as 1 -> True,
    is a change.
    Composite values carry no information about internal mutation, so they
    always count as changed, even when the same reference is written again.
    """
    if not isinstance(old, _PRIMITIVES) or not isinstance(new, _PRIMITIVES):
        return True
    if _is_number(old) and _is_number(new):
        if isinstance(old, float) and isinstance(new, float) and math.isnan(old) and math.isnan(new):
            return False
    elif type(old) is not type(new):
        return True
    return old != new


class StateTable:
    """Flat name -> value map shared by raw and computed properties."""

    def __init__(self, initial: Mapping[str, object] | None = None, computed: Container[str] = ()) -> None:
        self._values: dict[str, object] = dict(initial) if initial else {}
        self._computed = computed

    def get(self, name: str, default: object = None) -> object:
        return self._values.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def snapshot(self) -> dict[str, object]:
        """Copy of the top-level map. Nested objects are shared."""
        return dict(self._values)

    def check_writable(self, names) -> None:
        """Raise ComputedPropertyWriteError if any name is computed."""
        rejected = [name for name in names if name in self._computed]
        if rejected:
            raise ComputedPropertyWriteError(rejected)

    def apply_raw(self, patch: Mapping[str, object]) -> dict[str, object]:
        """Merge patch into the table. Returns the entries that changed."""
        self.check_writable(patch)
        changed: dict[str, object] = {}
        for name, value in patch.items():
            if differs(self._values.get(name, MISSING), value):
                changed[name] = value
            self._values[name] = value
        return changed

    def write(self, name: str, value: object) -> None:
        self._values[name] = value

    def restore(self, snapshot: Mapping[str, object]) -> None:
        self._values = dict(snapshot)

    def __repr__(self) -> str:
        return f"StateTable({self._values!r})"
