"""SourceWrapper — one source's sub-key map plus its reclamation handling.

Primitive sources (strings, numbers, None, ...) are held directly; they never
participate in garbage collection, so their associations live until someone
calls disassociate().

Object sources are held through weakref.ref, and weakref.finalize clears the
wrapper's associations once the source has been reclaimed. Objects that do
not support weak references are pinned instead and behave like primitives
with respect to lifetime, while still being keyed by identity.
"""

from __future__ import annotations

import logging
import threading
import weakref

from weakassoc.keys import is_primitive

logger = logging.getLogger("weakassoc.wrapper")


class _Pin:
    """Strong stand-in for weakref.ref: calling it returns the referent."""

    __slots__ = ("_obj",)

    def __init__(self, obj: object) -> None:
        self._obj = obj

    def __call__(self) -> object:
        return self._obj


def _reclaim(wrapper_ref: weakref.ref) -> None:
    # The wrapper may already be gone if its entry was disassociated.
    wrapper = wrapper_ref()
    if wrapper is not None:
        wrapper._on_reclaimed()


class SourceWrapper:
    """Holds the associations of a single source."""

    __slots__ = (
        "is_primitive",
        "value",
        "ref",
        "associations",
        "_finalizer",
        "_lock",
        "__weakref__",
    )

    def __init__(self, source: object) -> None:
        self.is_primitive = is_primitive(source)
        self.associations: dict = {}
        self.value = None
        self.ref = None
        self._finalizer = None
        self._lock = threading.RLock()

        if self.is_primitive:
            self.value = source
            return

        try:
            self.ref = weakref.ref(source)
        except TypeError:
            self.ref = _Pin(source)
            return

        self._finalizer = weakref.finalize(source, _reclaim, weakref.ref(self))
        self._finalizer.atexit = False

    @property
    def reclaimable(self) -> bool:
        """True if the source is tracked weakly and will be auto-evicted."""
        return self._finalizer is not None

    @property
    def alive(self) -> bool:
        if self.is_primitive:
            return True
        return self.ref is not None and self.ref() is not None

    def get(self) -> object:
        """Return the wrapped source, or None once it has been reclaimed."""
        if self.is_primitive:
            return self.value
        if self.ref is None:
            return None
        return self.ref()

    def refers_to(self, source: object) -> bool:
        if self.is_primitive:
            return is_primitive(source) and (self.value is source or self.value == source)
        return self.ref is not None and self.ref() is source

    def detach(self) -> None:
        """Unregister the reclamation hook. Used when the entry is dropped."""
        if self._finalizer is not None:
            self._finalizer.detach()
            self._finalizer = None

    def broadcast(self, value: object) -> None:
        """Overwrite every present sub-key with value; adds no new keys."""
        with self._lock:
            for key in list(self.associations):
                self.associations[key] = value

    def _on_reclaimed(self) -> None:
        with self._lock:
            count = len(self.associations)
            self.associations.clear()
            self.ref = None
        logger.debug("Source reclaimed: dropped %d associations", count)

    def __repr__(self) -> str:
        if self.is_primitive:
            target = repr(self.value)
        elif self.alive:
            target = f"<{type(self.ref()).__name__} object>"
        else:
            target = "<reclaimed>"
        return f"SourceWrapper({target}, keys={len(self.associations)})"
