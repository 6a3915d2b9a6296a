"""Core functionalities: property identities and the error hierarchy.

Architecture Note:
    core/ is stateless. Stores and views with runtime state live in storage/,
    generated proxy classes and their facade live in proxy/.
"""

from changetrack.core.errors import (
    AccessViolationError,
    ArgumentError,
    ChangeTrackingError,
    PropertyNotSetError,
    UnsupportedOperationError,
)
from changetrack.core.identity import (
    PropertyId,
    PropertyRef,
    declared_attributes,
    resolve_property,
    tracked_base,
)

__all__ = [
    # Errors
    "ChangeTrackingError",
    "ArgumentError",
    "AccessViolationError",
    "PropertyNotSetError",
    "UnsupportedOperationError",
    # Identity
    "PropertyId",
    "PropertyRef",
    "declared_attributes",
    "resolve_property",
    "tracked_base",
]
