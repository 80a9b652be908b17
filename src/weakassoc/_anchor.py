"""Module-level tables shared by every carrier.

The side table maps id(carrier) to a (handle, Store) pair instead of hanging
the Store off the carrier itself. Carriers are compared by the handle, not by
the id alone, so a recycled id never inherits another carrier's Store. Only
store.py reads or writes these names.
"""

import threading


class _DefaultCarrier:
    """The zero-configuration carrier used when no storage is supplied."""

    __slots__ = ("__weakref__",)

    def __repr__(self) -> str:
        return "<weakassoc default carrier>"


BUILTIN_CARRIER = _DefaultCarrier()

# Carrier in effect when callers pass storage=None
default_carrier: object = BUILTIN_CARRIER

# Side table: id(carrier) -> (handle, Store). handle() returns the carrier
# while it is alive; it is a weakref where the carrier supports one.
stores: dict[int, tuple] = {}

# Guards creation/removal of side-table entries
lock = threading.RLock()
