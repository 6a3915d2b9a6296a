"""Writable member discovery and tracking overrides for proxy classes.

A base attribute is trackable when it is public and writable:
    - property with a setter
    - slot member or other data descriptor
    - annotated instance attribute / dataclass field (frozen dataclasses excluded)

Each trackable attribute gets an overriding property on the proxy class whose
setter runs the base accessor first, then records the value in the embedded
store.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from changetrack.core.errors import ArgumentError
from changetrack.core.identity import PropertyId, writable_attributes
from changetrack.core.identity.resolver import MISSING

STORE_ATTR = "__changetrack_store__"
"""Slot on proxy instances holding the embedded TrackedView."""


@dataclass(frozen=True, slots=True)
class TrackedMember:
    """One writable base attribute and how to reach its storage.

    Attributes:
        identity: PropertyId recorded on writes.
        accessor: Base data descriptor, or None for instance ``__dict__`` storage.
        default: Class-level default for plain attributes, or MISSING.
    """

    identity: PropertyId
    accessor: Any = None
    default: Any = field(default_factory=lambda: MISSING)

    @property
    def name(self) -> str:
        return self.identity.name


class TrackedProperty(property):
    """Proxy override of a base attribute; ``identity`` is the attribute it records."""

    identity: PropertyId


def _is_final(obj: Any) -> bool:
    return bool(getattr(obj, "__final__", False))


def discover_members(base: type) -> list[TrackedMember]:
    """Collect the writable public attributes of ``base``.

    Raises:
        ArgumentError: If a writable attribute cannot be overridden.
    """
    members: list[TrackedMember] = []

    for name, (pid, value) in writable_attributes(base).items():
        if isinstance(value, property):
            if _is_final(value) or _is_final(value.fset):
                raise ArgumentError(f"The property {name} must not be final to be tracked.")
            members.append(TrackedMember(pid, accessor=value))
        elif hasattr(type(value), "__set__"):
            if _is_final(value):
                raise ArgumentError(f"The property {name} must not be final to be tracked.")
            members.append(TrackedMember(pid, accessor=value))
        else:
            members.append(TrackedMember(pid, default=value))

    return members


def _embedded_store(instance: Any) -> Any:
    return object.__getattribute__(instance, STORE_ATTR)


def _dict_accessors(
    member: TrackedMember,
) -> tuple[Callable[[Any], Any], Callable[[Any, Any], None], Callable[[Any], None]]:
    name = member.name
    default = member.default

    def fget(self: Any) -> Any:
        try:
            return self.__dict__[name]
        except KeyError:
            if default is not MISSING:
                return default
            raise AttributeError(
                f"{type(self).__name__!r} object has no attribute {name!r}"
            ) from None

    def fset(self: Any, value: Any) -> None:
        self.__dict__[name] = value

    def fdel(self: Any) -> None:
        try:
            del self.__dict__[name]
        except KeyError:
            raise AttributeError(name) from None

    return fget, fset, fdel


def _descriptor_accessors(
    member: TrackedMember,
) -> tuple[Callable[[Any], Any], Callable[[Any, Any], None], Callable[[Any], None] | None]:
    accessor = member.accessor

    def fget(self: Any) -> Any:
        return accessor.__get__(self, type(self))

    fdel = accessor.__delete__ if hasattr(type(accessor), "__delete__") else None
    return fget, accessor.__set__, fdel


def build_override(member: TrackedMember) -> TrackedProperty:
    """Build the proxy property that tracks writes to ``member``.

    The base accessor always runs before the store records the value, so
    the store never holds a value the object's real attribute does not.
    """
    if member.accessor is None:
        fget, base_set, fdel = _dict_accessors(member)
    else:
        fget, base_set, fdel = _descriptor_accessors(member)
    pid = member.identity

    def fset(self: Any, value: Any) -> None:
        base_set(self, value)
        _embedded_store(self).store.set(pid, value)

    doc = getattr(member.accessor, "__doc__", None) if member.accessor is not None else None
    override = TrackedProperty(fget, fset, fdel, doc)
    override.identity = pid
    return override
