"""Property identity: stable keys for tracked attributes and their resolver."""

from changetrack.core.identity.models import PropertyId, PropertyRef
from changetrack.core.identity.resolver import (
    TRACKED_BASE_ATTR,
    declared_attributes,
    resolve_property,
    tracked_base,
    writable_attributes,
)

__all__ = [
    "PropertyId",
    "PropertyRef",
    "TRACKED_BASE_ATTR",
    "declared_attributes",
    "resolve_property",
    "tracked_base",
    "writable_attributes",
]
