"""Typed view: a ValueStore bound to one class, addressed by property references.

Usage:
    view = TrackedView(Person, log_history=True)
    view.set(lambda p: p.name, "Ann")
    view.set("age", 12)
    view.get(Person.name)               # property objects work too
    view.load_to_instance(Person())     # apply stored values onto a plain object
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Self

from changetrack.core.errors import ArgumentError
from changetrack.core.identity import (
    PropertyId,
    PropertyRef,
    resolve_property,
    tracked_base,
    writable_attributes,
)
from changetrack.storage.models import AccessMode, ChangeListener
from changetrack.storage.values import ValueStore


class TrackedView[T]:
    """ValueStore facade that resolves property references against ``tracked_type``.

    Args:
        tracked_type: Class whose attributes the view tracks.
        log_history: Record history in a freshly created store.
        store: Existing store to wrap instead of creating one.
    """

    __slots__ = ("_tracked_type", "_store")

    def __init__(
        self,
        tracked_type: type[T],
        log_history: bool = False,
        *,
        store: ValueStore | None = None,
    ) -> None:
        self._tracked_type = tracked_base(tracked_type)
        self._store = store if store is not None else ValueStore(log_history=log_history)

    @classmethod
    def of(cls, instance: T, log_history: bool = False) -> TrackedView[T]:
        """Create a view seeded with every writable declared attribute of ``instance``.

        Read-only attributes are not captured, so the view can always be
        loaded back onto an instance. Attributes without a value on
        ``instance`` are skipped.
        """
        view: TrackedView[T] = cls(type(instance), log_history=log_history)
        for name, (pid, _) in writable_attributes(view._tracked_type).items():
            try:
                value = getattr(instance, name)
            except AttributeError:
                continue
            view._store.set(pid, value)
        return view

    @property
    def tracked_type(self) -> type[T]:
        return self._tracked_type

    @property
    def store(self) -> ValueStore:
        """The underlying identity-keyed store handle."""
        return self._store

    @property
    def access_mode(self) -> AccessMode:
        return self._store.access_mode

    @property
    def log_history(self) -> bool:
        return self._store.log_history

    def resolve(self, ref: PropertyRef) -> PropertyId:
        """Resolve ``ref`` to a PropertyId of the tracked type."""
        return resolve_property(self._tracked_type, ref)

    def get_property_type(self, ref: PropertyRef) -> Any:
        """Return the declared value type of the referenced attribute."""
        return self.resolve(ref).value_type

    def make_reference_copy(self, mode: AccessMode) -> TrackedView[T]:
        """Create a view over a reference copy of the store in ``mode``.

        Raises:
            ArgumentError: If ``mode`` is looser than the current mode.
        """
        return TrackedView(self._tracked_type, store=self._store.make_reference_copy(mode))

    def set(self, ref: PropertyRef, value: Any) -> Self:
        self._store.set(self.resolve(ref), value)
        return self

    def set_if_empty(self, ref: PropertyRef, value: Any) -> Self:
        self._store.set_if_empty(self.resolve(ref), value)
        return self

    def get(self, ref: PropertyRef) -> Any:
        return self._store.get(self.resolve(ref))

    def try_get(self, ref: PropertyRef) -> tuple[bool, Any]:
        return self._store.try_get(self.resolve(ref))

    def has_value(self, ref: PropertyRef) -> bool:
        return self._store.has_value(self.resolve(ref))

    def clear(self, ref: PropertyRef | None = None) -> Self:
        self._store.clear(None if ref is None else self.resolve(ref))
        return self

    def clear_history(self, ref: PropertyRef | None = None) -> None:
        self._store.clear_history(None if ref is None else self.resolve(ref))

    def get_values(self) -> Iterator[tuple[PropertyId, Any]]:
        return self._store.get_values()

    def get_history(self, ref: PropertyRef) -> tuple[Any, ...]:
        return self._store.get_history(self.resolve(ref))

    def subscribe(self, listener: ChangeListener) -> ChangeListener:
        return self._store.subscribe(listener)

    def unsubscribe(self, listener: ChangeListener) -> bool:
        return self._store.unsubscribe(listener)

    def load_to_instance(self, target: T) -> T:
        """Assign every stored value onto ``target`` through its attributes.

        Args:
            target: Instance of the tracked type (or a subclass, proxies included).

        Returns:
            ``target``, for chaining.

        Raises:
            ArgumentError: If ``target`` is not an instance of the tracked type, or
                a stored attribute is read-only. Nothing is assigned in that case.
        """
        if not isinstance(target, self._tracked_type):
            raise ArgumentError(
                f"Cannot load {self._tracked_type.__qualname__} values "
                f"onto {type(target).__qualname__}"
            )
        values = tuple(self._store.get_values())
        writable = writable_attributes(self._tracked_type)
        for prop, _ in values:
            if prop.name not in writable:
                raise ArgumentError(
                    f"Cannot load {prop} onto {type(target).__qualname__}: not a writable attribute"
                )
        for prop, value in values:
            setattr(target, prop.name, value)
        return target

    def __getitem__(self, ref: PropertyRef) -> Any:
        return self.get(ref)

    def __setitem__(self, ref: PropertyRef, value: Any) -> None:
        self.set(ref, value)

    def __delitem__(self, ref: PropertyRef) -> None:
        self.clear(ref)

    def __contains__(self, ref: object) -> bool:
        try:
            return self.has_value(ref)  # type: ignore[arg-type]
        except ArgumentError:
            return False

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return (
            f"TrackedView({self._tracked_type.__qualname__}, mode={self.access_mode.value}, "
            f"values={len(self._store)})"
        )
