"""Tracking storage: value stores, access modes and typed views.

Architecture Note:
    storage/ holds per-object runtime state. Stores are not synchronized;
    the only process-wide shared state lives in the proxy class cache.
"""

from changetrack.storage.models import AccessMode, ChangeListener, PropertyChanged
from changetrack.storage.values import ValueStore
from changetrack.storage.view import TrackedView

__all__ = [
    "AccessMode",
    "ChangeListener",
    "PropertyChanged",
    "ValueStore",
    "TrackedView",
]
