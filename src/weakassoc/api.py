"""Associations — values attached to a source without touching the source.

associate() stores a value against a source under a sub-key, associated()
reads it back, disassociate() removes it. Object sources are held weakly: once
nothing else references them, their associations are dropped on reclamation.
Primitive sources are held forever and must be disassociated explicitly.

Every call takes an optional storage carrier to scope the associations; by
default they go to the process-wide carrier (see set_default_storage).
"""

from __future__ import annotations

from typing import Callable, TypeVar

from weakassoc.errors import NoStorage
from weakassoc.keys import ALL, DEFAULT, MISSING
from weakassoc.store import store_for

T = TypeVar("T")

Comparator = Callable[[object], bool]


def associate(value: T, source: object, subkey=DEFAULT, *, storage: object = None) -> T:
    """Associate value with source under subkey. Returns value.

    With subkey=ALL every sub-key already present on source is overwritten;
    no new sub-key is created.

    Usage:
        user = User(id=1)
        associate("John", user)
        associate(perms, user, "permissions")

        # scoped to a component instead of the process-wide carrier
        associate(meta, target, storage=component)
    """
    if subkey is None:
        subkey = DEFAULT

    store = store_for(storage)
    if store is None:
        raise NoStorage(storage)

    wrapper = store.ensure(source)

    if subkey is ALL:
        wrapper.broadcast(value)
    else:
        wrapper.associations[subkey] = value

    return value


def associated(
    source: object,
    subkey=DEFAULT,
    *,
    storage: object = None,
    default: object = None,
    comparator: Comparator | None = None,
) -> object:
    """Return the value associated with source under subkey, or default.

    With a comparator, source is ignored: the Store is scanned and the first
    stored source for which comparator(source) is true and which has subkey
    set provides the value. This finds associations by attribute when the
    original object is no longer at hand:

        associate("X", User(id=1))
        associated(None, comparator=lambda u: u.id == 1)  # "X"
    """
    if subkey is None:
        subkey = DEFAULT

    store = store_for(storage, create=False)
    if store is None:
        return default

    if comparator is not None:
        for wrapper in store.find(comparator):
            if subkey in wrapper.associations:
                return wrapper.associations[subkey]
        return default

    wrapper = store.wrapper_for(source)
    if wrapper is None:
        return default
    return wrapper.associations.get(subkey, default)


def disassociate(source: object, subkey=ALL, *, storage: object = None) -> bool:
    """Remove subkey from source, or the whole source entry for ALL.

    Returns True if something was removed. Removing the last sub-key one at a
    time leaves the (empty) entry in place; only ALL removes the entry itself.
    """
    if subkey is None:
        subkey = ALL

    store = store_for(storage, create=False)
    if store is None:
        return False

    if subkey is ALL:
        return store.discard(source)

    wrapper = store.wrapper_for(source)
    if wrapper is None:
        return False
    return wrapper.associations.pop(subkey, MISSING) is not MISSING


def is_associated(
    source: object,
    *,
    storage: object = None,
    comparator: Comparator | None = None,
) -> bool:
    """Whether an entry exists for source, regardless of its sub-keys."""
    store = store_for(storage, create=False)
    if store is None:
        return False
    if comparator is not None:
        return next(store.find(comparator), None) is not None
    return source in store


def association(
    source: object, subkey=DEFAULT, **options
) -> tuple[Callable[..., object], Callable[[T], T], Callable[[], bool]]:
    """Return a (getter, setter, forget) triple bound to source and subkey.

    options (storage, comparator) are passed through to associated; storage
    also goes to associate and disassociate.

    Usage:
        get_name, set_name, forget_name = association(user)

        set_name("John")
        get_name()             # "John"

        forget_name()
        get_name()             # None
        get_name("Anonymous")  # "Anonymous"
    """
    unknown = set(options) - {"storage", "comparator"}
    if unknown:
        raise TypeError(f"association() got unexpected options: {sorted(unknown)}")

    write_options = {k: v for k, v in options.items() if k == "storage"}

    def getter(default: object = None) -> object:
        return associated(source, subkey, default=default, **options)

    def setter(value: T) -> T:
        return associate(value, source, subkey, **write_options)

    def forget() -> bool:
        return disassociate(source, subkey, **write_options)

    return getter, setter, forget
