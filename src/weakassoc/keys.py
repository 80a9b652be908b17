"""Reserved sub-key tokens.

DEFAULT is the sub-key used when the caller gives none. ALL means "every
present sub-key" when writing and "the whole source entry" when removing.
Both are enum members, so no string or number a caller passes can collide
with them.
"""

import enum


class _Key(enum.Enum):
    DEFAULT = "default"
    ALL = "all"
    MISSING = "missing"

    def __repr__(self) -> str:
        return f"weakassoc.{self.name}"


DEFAULT = _Key.DEFAULT
ALL = _Key.ALL

# Internal absent-marker; never stored, never returned to callers.
MISSING = _Key.MISSING

PRIMITIVE_TYPES = (type(None), bool, int, float, complex, str, bytes)


def is_primitive(value: object) -> bool:
    """Primitives are compared by value and never reclaimed."""
    return isinstance(value, PRIMITIVE_TYPES)
