"""Proxy class factory: generates change-tracking subclasses at runtime.

For a base class and a history flag the factory builds, once, a subclass that:
    - holds a write-once ``__changetrack_store__`` slot with a TrackedView
    - forwards constructor arguments unmodified to the base ``__init__``
    - overrides every writable public attribute so that assignments run the
      base accessor and then record the value in the embedded store

Usage:
    PersonProxy = get_or_create_proxy_type(Person, log_history=True)
    person = PersonProxy("Ann", age=12)
    person.age = 13
    get_tracker(person).get(lambda p: p.age)    # 13

Gotcha: the embedded store is assigned before the base ``__init__`` runs, so
assignments made by the base constructor are already tracked even though the
object is not fully constructed yet. Clear the tracker after construction if
only later writes matter.

Thread Safety:
    Concurrent callers may generate a class for the same key speculatively,
    but publication goes through a lock and only the first published class
    is ever returned.
"""

from __future__ import annotations

import functools
import inspect
import logging
import threading
from typing import Any, TypeVar

from changetrack.config import get_settings
from changetrack.core.errors import ArgumentError
from changetrack.core.identity import TRACKED_BASE_ATTR, PropertyId
from changetrack.proxy.members import STORE_ATTR, build_override, discover_members
from changetrack.storage.view import TrackedView

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRACKED_HISTORY_ATTR = "__tracked_history__"
TRACKED_MEMBERS_ATTR = "__tracked_members__"

_Py_TPFLAGS_BASETYPE = 1 << 10


def is_proxy_type(cls: Any) -> bool:
    """Check if ``cls`` was generated by a ProxyTypeFactory."""
    return isinstance(cls, type) and TRACKED_BASE_ATTR in vars(cls)


def _check_subclassable(base: Any) -> None:
    if not isinstance(base, type):
        raise ArgumentError(f"Expected a class, got {base!r}")
    if vars(base).get("__final__", False) or not base.__flags__ & _Py_TPFLAGS_BASETYPE:
        raise ArgumentError(f"The supplied type {base.__qualname__} must not be final.")


def _constructor_signature(base: type) -> inspect.Signature | None:
    try:
        return inspect.signature(base)
    except (TypeError, ValueError):
        return None


def _build_init(base: type, log_history: bool, signature: inspect.Signature | None) -> Any:
    base_init = base.__init__

    @functools.wraps(base_init)
    def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
        if signature is not None:
            try:
                signature.bind(*args, **kwargs)
            except TypeError as e:
                raise ArgumentError(
                    f"No constructor of {base.__qualname__} matches the supplied arguments: {e}"
                ) from e
        try:
            object.__getattribute__(self, STORE_ATTR)
        except AttributeError:
            object.__setattr__(self, STORE_ATTR, TrackedView(base, log_history=log_history))
        base_init(self, *args, **kwargs)

    return __init__


def build_proxy_type(base: type[T], log_history: bool) -> type[T]:
    """Generate a new proxy class for ``base`` without consulting any cache.

    Args:
        base: Class to derive from.
        log_history: Whether embedded stores record history.

    Returns:
        Freshly generated proxy class.

    Raises:
        ArgumentError: If ``base`` is final or has a writable attribute that
            cannot be overridden.
    """
    _check_subclassable(base)
    members = discover_members(base)
    signature = _constructor_signature(base)

    namespace: dict[str, Any] = {
        "__slots__": (STORE_ATTR,),
        "__module__": base.__module__,
        "__qualname__": f"{base.__qualname__}{get_settings().proxy_name_suffix}",
        "__doc__": base.__doc__,
        "__init__": _build_init(base, log_history, signature),
        "__final__": True,
        TRACKED_BASE_ATTR: base,
        TRACKED_HISTORY_ATTR: log_history,
        TRACKED_MEMBERS_ATTR: tuple(m.identity for m in members),
    }
    if signature is not None:
        namespace["__signature__"] = signature
    for member in members:
        namespace[member.name] = build_override(member)

    name = f"{base.__name__}{get_settings().proxy_name_suffix}"
    try:
        proxy = type(base)(name, (base,), namespace)
    except TypeError as e:
        raise ArgumentError(f"Cannot derive a proxy class from {base.__qualname__}: {e}") from e
    logger.debug(
        "Generated proxy class for %s (log_history=%s) tracking %s",
        base.__qualname__,
        log_history,
        [m.name for m in members],
    )
    return proxy


class ProxyTypeFactory:
    """Cache of generated proxy classes keyed by (base class, history flag).

    Exactly one proxy class is ever returned per key for the factory's
    lifetime, including under concurrent callers.
    """

    def __init__(self) -> None:
        """Initialize an empty factory."""
        self._cache: dict[tuple[type, bool], type] = {}
        self._lock = threading.Lock()

    def get_or_create(self, base: type[T], log_history: bool = False) -> type[T]:
        """Return the proxy class for ``base``, generating it on first request.

        Args:
            base: Class to derive from.
            log_history: Whether embedded stores record history.

        Returns:
            The cached proxy class; identical across calls with equal inputs.

        Raises:
            ArgumentError: If ``base`` cannot be proxied.
        """
        key = (base, bool(log_history))
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            proxy = build_proxy_type(base, key[1])
        except ArgumentError as e:
            logger.debug("Rejected proxy generation for %r: %s", base, e)
            raise

        with self._lock:
            winner = self._cache.setdefault(key, proxy)
        if winner is not proxy:
            logger.debug("Discarded duplicate proxy class for %s", base.__qualname__)
        return winner

    def tracked_properties(self, proxy: type) -> tuple[PropertyId, ...]:
        """Return the identities a proxy class records on assignment.

        Raises:
            ArgumentError: If ``proxy`` is not a generated proxy class.
        """
        if not is_proxy_type(proxy):
            raise ArgumentError(f"{proxy!r} is not a proxy class")
        return vars(proxy)[TRACKED_MEMBERS_ATTR]

    def clear_cache(self) -> None:
        """Forget every generated class. Existing instances keep working."""
        with self._lock:
            self._cache.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)


# Module-level factory instance
_factory = ProxyTypeFactory()


def get_factory() -> ProxyTypeFactory:
    """Access the process-wide proxy factory."""
    return _factory


def get_or_create_proxy_type(base: type[T], log_history: bool | None = None) -> type[T]:
    """Return the process-wide proxy class for ``base``.

    Args:
        base: Class to derive from.
        log_history: History flag; None uses the configured default.
    """
    if log_history is None:
        log_history = get_settings().log_history
    return _factory.get_or_create(base, log_history)
