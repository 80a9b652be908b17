"""Exceptions raised by weakassoc.

Lookups of unknown sources or sub-keys are not errors; they resolve to the
caller's default. Only carrier problems raise.
"""


class AssociationError(Exception):
    """Base class for weakassoc errors."""


class InvalidCarrier(AssociationError, TypeError):
    """A primitive value was supplied where a storage carrier is required."""

    def __init__(self, carrier: object) -> None:
        self.carrier = carrier
        super().__init__(f"Cannot use {carrier!r} as storage carrier.")


class NoStorage(AssociationError, RuntimeError):
    """No Store could be obtained for a carrier while associating."""

    def __init__(self, carrier: object) -> None:
        self.carrier = carrier
        super().__init__(
            f"No storage map within which to store associated values for {carrier!r}"
        )
