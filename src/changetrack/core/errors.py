"""Exception hierarchy for change tracking.

All errors derive from ChangeTrackingError so callers can catch the whole
family, while each also subclasses the closest builtin so generic handlers
(``except KeyError``) keep working.
"""

from __future__ import annotations


class ChangeTrackingError(Exception):
    """Base class for every error raised by changetrack."""

    pass


class ArgumentError(ChangeTrackingError, ValueError):
    """Raised for invalid inputs: final base classes, unoverridable attributes,
    unmatched constructor arguments, unresolvable property references and
    attempts to loosen an access mode.

    These are programming errors and are never retried.
    """

    pass


class AccessViolationError(ChangeTrackingError):
    """Raised when a store handle's access mode forbids the operation."""

    pass


class PropertyNotSetError(ChangeTrackingError, KeyError):
    """Raised when reading a property that has no current value."""

    pass


class UnsupportedOperationError(ChangeTrackingError, NotImplementedError):
    """Raised for history operations on a store without history logging."""

    pass
