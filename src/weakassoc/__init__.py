"""weakassoc: identity-keyed sidecar attributes that never keep their source alive."""

from importlib.metadata import version as _version

__version__ = _version("weakassoc")

from weakassoc.keys import ALL, DEFAULT
from weakassoc.errors import AssociationError, InvalidCarrier, NoStorage
from weakassoc.wrapper import SourceWrapper
from weakassoc.store import (
    Store,
    default_storage,
    remove_store,
    set_default_storage,
    store_for,
)
from weakassoc.api import (
    associate,
    associated,
    association,
    disassociate,
    is_associated,
)
# textual NOT auto-imported — opt-in only

__all__ = [
    "associate",
    "associated",
    "disassociate",
    "association",
    "is_associated",
    "store_for",
    "remove_store",
    "default_storage",
    "set_default_storage",
    "Store",
    "SourceWrapper",
    "DEFAULT",
    "ALL",
    "AssociationError",
    "InvalidCarrier",
    "NoStorage",
]
