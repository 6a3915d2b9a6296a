"""Resolve property references to PropertyId values.

A class's declared attributes are the public names found along its MRO
(excluding ``object``) that are either:
    - properties or other data descriptors (slot members, custom descriptors)
    - annotated instance attributes (dataclass fields included)

ClassVar and InitVar annotations and private names (leading underscore) are
not attributes. The first class in the MRO that declares a name owns it.

Usage:
    resolve_property(Person, "age")
    resolve_property(Person, lambda p: p.age)
    resolve_property(Person, Person.age)        # property object
    resolve_property(Person, PersonProxy.age)   # proxy override of the same attribute
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any, ClassVar, get_origin

from changetrack.core.errors import ArgumentError
from changetrack.core.identity.models import PropertyId, PropertyRef

TRACKED_BASE_ATTR = "__tracked_base__"
"""Class attribute set on generated proxy classes, pointing at their base."""

MISSING: Any = dataclasses.MISSING
"""Marker for annotated attributes without a class-level value."""

_NON_ATTRIBUTE_PREFIXES = ("ClassVar", "typing.ClassVar", "InitVar", "dataclasses.InitVar")


def tracked_base(cls: type) -> type:
    """Return the class identities are declared against.

    Generated proxy classes resolve against their base so that identities
    are shared between the proxy, its base and plain views of the base.
    """
    return vars(cls).get(TRACKED_BASE_ATTR, cls)


def _is_non_attribute(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(_NON_ATTRIBUTE_PREFIXES)
    if isinstance(annotation, dataclasses.InitVar) or annotation is dataclasses.InitVar:
        return True
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _is_descriptor_attribute(value: Any) -> bool:
    return isinstance(value, property) or hasattr(type(value), "__set__")


def _value_type(annotations: Mapping[str, Any], name: str, value: Any) -> Any:
    if name in annotations:
        return annotations[name]
    if isinstance(value, property) and value.fget is not None:
        return inspect.get_annotations(value.fget).get("return", Any)
    return Any


@lru_cache(maxsize=512)
def declared_attributes(cls: type) -> Mapping[str, tuple[PropertyId, Any]]:
    """Map each declared public attribute of ``cls`` to its identity and class value.

    The class value is the descriptor (or default) found in the declaring
    class namespace, or MISSING for annotation-only attributes.

    Args:
        cls: Class to inspect. Proxy classes are inspected through their base.

    Returns:
        Read-only mapping of attribute name to (PropertyId, class value).
    """
    cls = tracked_base(cls)
    found: dict[str, tuple[PropertyId, Any]] = {}
    seen: set[str] = set()

    for klass in cls.__mro__:
        if klass is object:
            continue
        namespace = vars(klass)
        annotations = inspect.get_annotations(klass)

        for name, value in namespace.items():
            if name in seen or name.startswith("_"):
                continue
            # A name defined here shadows anything further down the MRO.
            seen.add(name)
            if name in annotations:
                if _is_non_attribute(annotations[name]):
                    continue
            elif not _is_descriptor_attribute(value):
                continue
            pid = PropertyId(name, klass, _value_type(annotations, name, value))
            found[name] = (pid, value)

        for name, annotation in annotations.items():
            if name in seen or name.startswith("_"):
                continue
            seen.add(name)
            if _is_non_attribute(annotation):
                continue
            found[name] = (PropertyId(name, klass, annotation), MISSING)

    return MappingProxyType(found)


def _frozen_dataclass_fields(cls: type) -> frozenset[str]:
    params = getattr(cls, "__dataclass_params__", None)
    if params is None or not params.frozen:
        return frozenset()
    return frozenset(f.name for f in dataclasses.fields(cls))


def _is_writable(value: Any) -> bool:
    if isinstance(value, property):
        return value.fset is not None
    return True


@lru_cache(maxsize=512)
def writable_attributes(cls: type) -> Mapping[str, tuple[PropertyId, Any]]:
    """Subset of declared_attributes() that instances of ``cls`` accept assignments to.

    Read-only properties and frozen dataclass fields are excluded.
    """
    cls = tracked_base(cls)
    frozen = _frozen_dataclass_fields(cls)
    return MappingProxyType(
        {
            name: entry
            for name, entry in declared_attributes(cls).items()
            if name not in frozen and _is_writable(entry[1])
        }
    )


class _AttributeProbe:
    """Records attribute names read from it; used to evaluate lambda references."""

    __slots__ = ("_names",)

    def __init__(self) -> None:
        object.__setattr__(self, "_names", [])

    def __getattribute__(self, name: str) -> Any:
        object.__getattribute__(self, "_names").append(name)
        return _PROBED

    def __setattr__(self, name: str, value: Any) -> None:
        raise ArgumentError("Property references must not assign attributes")


_PROBED = object()


def _probe_attribute_name(ref: Any) -> str:
    probe = _AttributeProbe()
    try:
        result = ref(probe)
    except AttributeError as e:
        raise ArgumentError(
            "Property reference must be a single attribute access, e.g. `lambda p: p.name`"
        ) from e
    names = object.__getattribute__(probe, "_names")
    if len(names) != 1 or result is not _PROBED:
        raise ArgumentError(
            "Property reference must be a single attribute access, e.g. `lambda p: p.name`"
        )
    return names[0]


def resolve_property(cls: type, ref: PropertyRef) -> PropertyId:
    """Resolve a property reference against ``cls``.

    Args:
        cls: Class the reference is bound to.
        ref: PropertyId, attribute name, property object, or one-attribute lambda.

    Returns:
        The canonical PropertyId. Repeated calls return equal identities.

    Raises:
        ArgumentError: If the reference does not name a declared public
            attribute of ``cls``.
    """
    if isinstance(ref, PropertyId):
        return ref

    attributes = declared_attributes(cls)

    if isinstance(ref, property):
        for pid, value in attributes.values():
            if value is ref:
                return pid
        # Proxy overrides carry the identity of the attribute they replace
        pid = getattr(ref, "identity", None)
        if isinstance(pid, PropertyId) and pid.name in attributes:
            if attributes[pid.name][0] == pid:
                return pid
        raise ArgumentError(f"Property object is not declared on {cls.__qualname__}")

    if isinstance(ref, str):
        name = ref
    elif callable(ref):
        name = _probe_attribute_name(ref)
    else:
        raise ArgumentError(f"Unsupported property reference: {ref!r}")

    entry = attributes.get(name)
    if entry is None:
        raise ArgumentError(f"{tracked_base(cls).__qualname__} has no public attribute {name!r}")
    return entry[0]
