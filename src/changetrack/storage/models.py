"""Storage models: access modes, change events, and the listener protocol."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from changetrack.core.identity import PropertyId

if TYPE_CHECKING:
    from changetrack.storage.values import ValueStore


class AccessMode(Enum):
    """Restriction level of a store handle.

    Modes are ordered READ_WRITE < NO_SET < READ_ONLY. A handle can only
    derive reference copies at its own level or stricter.
    """

    READ_WRITE = "read_write"  # Default for fresh stores
    NO_SET = "no_set"  # Reads and clears, no set
    READ_ONLY = "read_only"  # Reads only

    @property
    def restriction(self) -> int:
        """Position in the restriction order (higher is stricter)."""
        return _RESTRICTION[self]

    def permits(self, other: AccessMode) -> bool:
        """Check if a handle in this mode may derive a handle in ``other``.

        Returns:
            True if ``other`` is equal to or stricter than this mode.
        """
        return other.restriction >= self.restriction

    @property
    def can_set(self) -> bool:
        return self is AccessMode.READ_WRITE

    @property
    def can_clear(self) -> bool:
        return self is not AccessMode.READ_ONLY


_RESTRICTION = {
    AccessMode.READ_WRITE: 0,
    AccessMode.NO_SET: 1,
    AccessMode.READ_ONLY: 2,
}


@dataclass(frozen=True, slots=True)
class PropertyChanged:
    """Notification delivered to listeners after every successful set.

    Attributes:
        sender: Store handle the set was performed through.
        property: Identity that was written.
        value: Value that was written.
    """

    sender: ValueStore
    property: PropertyId
    value: Any


@runtime_checkable
class ChangeListener(Protocol):
    """Callable invoked synchronously with each PropertyChanged event."""

    def __call__(self, event: PropertyChanged) -> None: ...
