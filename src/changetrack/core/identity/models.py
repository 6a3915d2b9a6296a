"""Property identity models.

Usage:
    pid = PropertyId(name="age", declaring_type=Person, value_type=int)
    store.set(pid, 42)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PropertyId:
    """Stable identity of one attribute on one declaring class.

    Equality and hashing are structural, so identities resolved separately
    for the same attribute are interchangeable as store keys.
    """

    name: str
    declaring_type: type
    value_type: Any = Any

    def __str__(self) -> str:
        return f"{self.declaring_type.__qualname__}.{self.name}"


type PropertyRef = PropertyId | str | property | Callable[[Any], Any]
"""Anything resolve_property() accepts: an identity, an attribute name,
a property object, or a one-attribute lambda such as ``lambda p: p.name``.
"""
