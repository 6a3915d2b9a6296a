"""Value store: current values, optional history, and access-mode gating.

One store holds the tracked state of one object:
    _values[property] = current value (last write wins)
    _histories[property] = [every value set, oldest first]   (history only)

Reference copies alias the same maps and listener list under an equal or
stricter access mode, so a write through one handle is visible through all.

Usage:
    store = ValueStore(log_history=True)
    store.set(pid, "Ann").set(other_pid, 12)
    store.get(pid)                  # "Ann"
    list(store.get_history(pid))    # ["Ann"]

    view = store.make_reference_copy(AccessMode.NO_SET)
    view.set(pid, "Bob")            # AccessViolationError

Gotcha: stores carry no locking. Concurrent writers on one store must
synchronize themselves.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Self

from changetrack.core.errors import (
    AccessViolationError,
    ArgumentError,
    PropertyNotSetError,
    UnsupportedOperationError,
)
from changetrack.core.identity import PropertyId
from changetrack.storage.models import AccessMode, ChangeListener, PropertyChanged


class ValueStore:
    """Tracked values for one object, keyed by PropertyId.

    Args:
        log_history: Record every value set per property, oldest first.
    """

    __slots__ = ("_access_mode", "_values", "_histories", "_listeners")

    def __init__(self, log_history: bool = False) -> None:
        self._access_mode = AccessMode.READ_WRITE
        self._values: dict[PropertyId, Any] = {}
        self._histories: dict[PropertyId, list[Any]] | None = {} if log_history else None
        self._listeners: list[ChangeListener] = []

    @property
    def access_mode(self) -> AccessMode:
        return self._access_mode

    @property
    def log_history(self) -> bool:
        return self._histories is not None

    def _check_set(self) -> None:
        if not self._access_mode.can_set:
            raise AccessViolationError(
                f"Cannot set values through a {self._access_mode.value} store handle"
            )

    def _check_clear(self, what: str) -> None:
        if not self._access_mode.can_clear:
            raise AccessViolationError(
                f"Cannot clear {what} through a {self._access_mode.value} store handle"
            )

    def _require_history(self) -> dict[PropertyId, list[Any]]:
        if self._histories is None:
            raise UnsupportedOperationError("History logging is disabled for this store")
        return self._histories

    def make_reference_copy(self, mode: AccessMode) -> ValueStore:
        """Create a handle sharing this store's data under ``mode``.

        Args:
            mode: Access mode of the new handle; must be at least as
                restrictive as this handle's mode.

        Returns:
            New handle aliasing the same values, history and listeners.

        Raises:
            ArgumentError: If ``mode`` is looser than the current mode.
        """
        if not self._access_mode.permits(mode):
            raise ArgumentError(
                f"Access mode {mode.value} is less restrictive than {self._access_mode.value}"
            )
        copy = ValueStore.__new__(ValueStore)
        copy._access_mode = mode
        copy._values = self._values
        copy._histories = self._histories
        copy._listeners = self._listeners
        return copy

    def set(self, prop: PropertyId, value: Any) -> Self:
        """Record ``value`` as the current value of ``prop``.

        Appends to the history when enabled and notifies listeners before
        returning.

        Raises:
            AccessViolationError: Under NO_SET or READ_ONLY.
        """
        self._check_set()
        self._values[prop] = value
        if self._histories is not None:
            self._histories.setdefault(prop, []).append(value)
        self._notify(prop, value)
        return self

    def set_if_empty(self, prop: PropertyId, value: Any) -> Self:
        """Set ``prop`` only if it has no current value."""
        if prop in self._values:
            return self
        return self.set(prop, value)

    def get(self, prop: PropertyId) -> Any:
        """Return the current value of ``prop``.

        Raises:
            PropertyNotSetError: If ``prop`` has no current value.
        """
        try:
            return self._values[prop]
        except KeyError:
            raise PropertyNotSetError(prop) from None

    def try_get(self, prop: PropertyId) -> tuple[bool, Any]:
        """Return ``(True, value)`` if ``prop`` is set, else ``(False, None)``."""
        if prop in self._values:
            return True, self._values[prop]
        return False, None

    def has_value(self, prop: PropertyId) -> bool:
        return prop in self._values

    def clear(self, prop: PropertyId | None = None) -> Self:
        """Remove every current value, or only that of ``prop``.

        History is left untouched.

        Raises:
            AccessViolationError: Under READ_ONLY.
        """
        self._check_clear("values")
        if prop is None:
            self._values.clear()
        else:
            self._values.pop(prop, None)
        return self

    def clear_history(self, prop: PropertyId | None = None) -> None:
        """Remove every history entry, or only those of ``prop``.

        Raises:
            AccessViolationError: Under READ_ONLY.
            UnsupportedOperationError: If history logging is disabled.
        """
        self._check_clear("history")
        histories = self._require_history()
        if prop is None:
            histories.clear()
        else:
            histories.pop(prop, None)

    def get_values(self) -> Iterator[tuple[PropertyId, Any]]:
        """Iterate (property, value) pairs for every current value.

        Order is unspecified. The pairs are snapshotted when iteration starts.
        """
        yield from tuple(self._values.items())

    def get_history(self, prop: PropertyId) -> tuple[Any, ...]:
        """Return every value set for ``prop``, oldest first.

        Returns:
            Empty tuple if ``prop`` was never set.

        Raises:
            UnsupportedOperationError: If history logging is disabled.
        """
        return tuple(self._require_history().get(prop, ()))

    def subscribe(self, listener: ChangeListener) -> ChangeListener:
        """Register ``listener`` for change notifications.

        Listeners are shared by every reference copy of this store and run
        in registration order. Returns the listener so this can be used as a
        decorator.
        """
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: ChangeListener) -> bool:
        """Remove ``listener``. Returns True if it was registered."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def _notify(self, prop: PropertyId, value: Any) -> None:
        if not self._listeners:
            return
        event = PropertyChanged(sender=self, property=prop, value=value)
        for listener in tuple(self._listeners):
            listener(event)

    def __getitem__(self, prop: PropertyId) -> Any:
        return self.get(prop)

    def __setitem__(self, prop: PropertyId, value: Any) -> None:
        self.set(prop, value)

    def __delitem__(self, prop: PropertyId) -> None:
        self.clear(prop)

    def __contains__(self, prop: object) -> bool:
        return prop in self._values

    def __iter__(self) -> Iterator[PropertyId]:
        return iter(tuple(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return (
            f"ValueStore(mode={self._access_mode.value}, values={len(self._values)}, "
            f"log_history={self.log_history})"
        )
