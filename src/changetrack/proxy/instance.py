"""Proxy instances: creation, tracker access, and the TrackedInstance facade.

Usage:
    tracked = TrackedInstance(Person, "Ann", log_history=True)
    tracked.instance.age = 30
    tracked.tracker.get_history(lambda p: p.age)    # (30,)

    # Seed a new proxy from an earlier snapshot without recording the seed
    again = TrackedInstance(Person, "Ann", snapshot=tracked.tracker)
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from changetrack.config import get_settings
from changetrack.core.errors import ArgumentError
from changetrack.proxy.factory import get_or_create_proxy_type, is_proxy_type
from changetrack.proxy.members import STORE_ATTR
from changetrack.storage.models import AccessMode
from changetrack.storage.view import TrackedView

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _embedded_view(obj: Any) -> TrackedView[Any]:
    if not is_proxy_type(type(obj)):
        raise ArgumentError(f"{type(obj).__qualname__} object was not created from a proxy class")
    try:
        return object.__getattribute__(obj, STORE_ATTR)
    except AttributeError:
        raise ArgumentError(
            f"{type(obj).__qualname__} object was never initialized through its constructor"
        ) from None


def is_proxy(obj: Any) -> bool:
    """Check if ``obj`` is an instance of a generated proxy class."""
    return is_proxy_type(type(obj))


def create_proxy(base: type[T], /, *args: Any, log_history: bool | None = None, **kwargs: Any) -> T:
    """Instantiate the proxy class for ``base`` with the given constructor arguments.

    Args:
        base: Class to proxy.
        *args: Positional arguments for the base constructor.
        log_history: History flag; None uses the configured default.
        **kwargs: Keyword arguments for the base constructor.

    Raises:
        ArgumentError: If ``base`` cannot be proxied or no base constructor
            matches the arguments.
    """
    proxy_type = get_or_create_proxy_type(base, log_history)
    return proxy_type(*args, **kwargs)


def get_tracker(obj: T, mode: AccessMode | None = None) -> TrackedView[T]:
    """Return a restricted handle onto the store embedded in a proxy instance.

    Args:
        obj: Proxy instance.
        mode: NO_SET or READ_ONLY; None uses the configured default.

    Raises:
        ArgumentError: If ``obj`` is not a proxy instance or ``mode`` is READ_WRITE.
    """
    if mode is None:
        mode = get_settings().tracker_access_mode
    if mode is AccessMode.READ_WRITE:
        raise ArgumentError("Trackers cannot be writable; assign attributes on the instance")
    return _embedded_view(obj).make_reference_copy(mode)


class TrackedInstance[T]:
    """A proxy instance paired with a restricted handle onto its tracked values.

    Args:
        base: Class to proxy.
        *args: Positional arguments for the base constructor.
        snapshot: Values to load onto the new instance before it is exposed.
            The seeding writes are not left in the tracker.
        log_history: History flag; None uses the configured default.
        access_mode: Mode of ``tracker``. Only READ_ONLY is accepted; None means
            READ_ONLY. Use get_tracker() on ``instance`` for a NO_SET handle.
        **kwargs: Keyword arguments for the base constructor.

    Gotcha: base constructor parameters named ``snapshot``, ``log_history``
    or ``access_mode`` are shadowed; use create_proxy() for such classes.
    """

    __slots__ = ("_instance", "_tracker")

    def __init__(
        self,
        base: type[T],
        /,
        *args: Any,
        snapshot: TrackedView[T] | None = None,
        log_history: bool | None = None,
        access_mode: AccessMode | None = None,
        **kwargs: Any,
    ) -> None:
        if access_mode is None:
            access_mode = AccessMode.READ_ONLY
        if access_mode is not AccessMode.READ_ONLY:
            raise ArgumentError(
                f"TrackedInstance trackers must be read_only, got {access_mode.value}"
            )
        if snapshot is not None and not issubclass(base, snapshot.tracked_type):
            raise ArgumentError(
                f"Snapshot of {snapshot.tracked_type.__qualname__} "
                f"cannot seed {base.__qualname__}"
            )

        instance = create_proxy(base, *args, log_history=log_history, **kwargs)

        if snapshot is not None:
            snapshot.load_to_instance(instance)
            embedded = _embedded_view(instance)
            embedded.clear()
            if embedded.log_history:
                embedded.clear_history()
            logger.debug(
                "Seeded %s proxy from snapshot with %d values", base.__qualname__, len(snapshot)
            )

        self._instance: T = instance
        self._tracker: TrackedView[T] = get_tracker(instance, access_mode)

    @property
    def instance(self) -> T:
        """The proxy instance; assign its attributes to record changes."""
        return self._instance

    @property
    def tracker(self) -> TrackedView[T]:
        """Restricted handle onto the instance's tracked values."""
        return self._tracker

    def __repr__(self) -> str:
        return f"TrackedInstance({self._instance!r}, tracker={self._tracker!r})"
