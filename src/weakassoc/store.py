"""Store — identity-keyed map from sources to their SourceWrappers.

Each carrier gets at most one Store. Stores are kept in a side table in
_anchor keyed by id(carrier), so the carrier itself is never mutated: its
attributes, dir() and repr stay exactly as they were. The side-table entry
goes away with the carrier when the carrier supports weak references, and
otherwise lives until remove_store().
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Callable, Iterator

from weakassoc import _anchor
from weakassoc.errors import InvalidCarrier
from weakassoc.keys import is_primitive
from weakassoc.wrapper import SourceWrapper, _Pin

logger = logging.getLogger("weakassoc.store")


def _identity(source: object) -> tuple:
    """Primitives are keyed by value, everything else by id()."""
    if is_primitive(source):
        return ("value", source)
    return ("id", id(source))


class Store:
    """Maps source identity to SourceWrapper for a single carrier."""

    def __init__(self) -> None:
        self._wrappers: dict[tuple, SourceWrapper] = {}
        self._lock = threading.RLock()

    def wrapper_for(self, source: object) -> SourceWrapper | None:
        """Return the wrapper for source, or None if it has none.

        A wrapper whose object was reclaimed never matches a new object that
        happens to reuse the same id.
        """
        wrapper = self._wrappers.get(_identity(source))
        if wrapper is None or not wrapper.refers_to(source):
            return None
        return wrapper

    def ensure(self, source: object) -> SourceWrapper:
        """Get or create the wrapper for source."""
        wrapper = self.wrapper_for(source)
        if wrapper is not None:
            return wrapper

        with self._lock:
            # Another thread may have created it while we waited.
            wrapper = self.wrapper_for(source)
            if wrapper is None:
                key = _identity(source)
                stale = self._wrappers.get(key)
                if stale is not None:
                    stale.detach()
                wrapper = SourceWrapper(source)
                self._wrappers[key] = wrapper
            return wrapper

    def discard(self, source: object) -> bool:
        """Remove the whole entry for source. Returns whether one existed."""
        with self._lock:
            wrapper = self.wrapper_for(source)
            if wrapper is None:
                return False
            del self._wrappers[_identity(source)]
        wrapper.detach()
        return True

    def entries(self) -> list[tuple[object, SourceWrapper]]:
        """Snapshot of (source, wrapper) pairs whose source is still alive."""
        return [(w.get(), w) for w in list(self._wrappers.values()) if w.alive]

    def find(self, comparator: Callable[[object], bool]) -> Iterator[SourceWrapper]:
        """Yield wrappers whose live source satisfies comparator, in Store order."""
        for source, wrapper in self.entries():
            if comparator(source):
                yield wrapper

    def prune(self) -> int:
        """Drop entries whose source has been reclaimed. Returns how many."""
        with self._lock:
            dead = [key for key, w in self._wrappers.items() if not w.alive]
            for key in dead:
                del self._wrappers[key]
        if dead:
            logger.debug("Pruned %d reclaimed entries", len(dead))
        return len(dead)

    def clear(self) -> None:
        with self._lock:
            wrappers = list(self._wrappers.values())
            self._wrappers.clear()
        for wrapper in wrappers:
            wrapper.detach()

    def __contains__(self, source: object) -> bool:
        return self.wrapper_for(source) is not None

    def __len__(self) -> int:
        return len(self._wrappers)

    def __repr__(self) -> str:
        return f"Store({len(self._wrappers)} sources)"


def _resolve_carrier(carrier: object) -> object:
    if carrier is None:
        carrier = _anchor.default_carrier
    if is_primitive(carrier):
        raise InvalidCarrier(carrier)
    return carrier


def _drop_carrier(key: int, handle: weakref.ref) -> None:
    # Weakref callback: the carrier is gone, so is its Store.
    with _anchor.lock:
        entry = _anchor.stores.get(key)
        if entry is not None and entry[0] is handle:
            del _anchor.stores[key]
            logger.debug("Carrier reclaimed: dropped its store")


def _attached(carrier: object) -> Store | None:
    entry = _anchor.stores.get(id(carrier))
    if entry is None or entry[0]() is not carrier:
        return None
    return entry[1]


def store_for(carrier: object = None, create: bool = True) -> Store | None:
    """Return the Store attached to carrier, creating it when create is True.

    carrier=None means the process-wide default carrier. With create=False a
    missing Store yields None and nothing is attached.
    """
    carrier = _resolve_carrier(carrier)
    store = _attached(carrier)
    if store is not None or not create:
        return store

    with _anchor.lock:
        # Another thread may have attached one while we waited.
        store = _attached(carrier)
        if store is not None:
            return store

        key = id(carrier)
        try:
            handle = weakref.ref(carrier, lambda ref, key=key: _drop_carrier(key, ref))
        except TypeError:
            handle = _Pin(carrier)

        store = Store()
        _anchor.stores[key] = (handle, store)
        logger.debug("Attached new store to %s", type(carrier).__name__)
        return store


def remove_store(carrier: object = None) -> Store | None:
    """Detach and return carrier's Store. Returns None if it had none."""
    carrier = _resolve_carrier(carrier)
    with _anchor.lock:
        store = _attached(carrier)
        if store is not None:
            del _anchor.stores[id(carrier)]
            logger.debug("Detached store from %s", type(carrier).__name__)
        return store


def default_storage() -> object:
    """The carrier used when callers pass storage=None."""
    return _anchor.default_carrier


def set_default_storage(carrier: object) -> object:
    """Replace the process-wide default carrier. Returns the previous one.

    Passing None restores the built-in carrier. Call once at startup; every
    module that relies on the default shares whatever is set here.
    """
    if carrier is None:
        carrier = _anchor.BUILTIN_CARRIER
    elif is_primitive(carrier):
        raise InvalidCarrier(carrier)
    previous = _anchor.default_carrier
    _anchor.default_carrier = carrier
    return previous
