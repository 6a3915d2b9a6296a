"""changetrack: transparent change tracking for plain Python objects.

Usage:
    from changetrack import TrackedInstance, get_or_create_proxy_type, get_tracker

    class Person:
        def __init__(self, age: int) -> None:
            self.age = age

        age: int
        name: str = ""

    # Facade: instance plus a restricted tracker
    tracked = TrackedInstance(Person, 12, log_history=True)
    tracked.instance.name = "Ann"
    tracked.tracker.get(lambda p: p.name)           # "Ann"

    # Or work with the generated class directly
    PersonProxy = get_or_create_proxy_type(Person)
    person = PersonProxy(12)
    get_tracker(person).clear()
    person.name = "Bob"
    list(get_tracker(person).get_values())          # [(PropertyId(name=...), "Bob")]
"""

__version__ = "0.1.0"

# Core primitives
from changetrack.core import (
    AccessViolationError,
    ArgumentError,
    ChangeTrackingError,
    PropertyId,
    PropertyNotSetError,
    PropertyRef,
    UnsupportedOperationError,
    resolve_property,
)

# Configuration
from changetrack.config import ChangeTrackingSettings, get_settings

# Proxies
from changetrack.proxy import (
    ProxyTypeFactory,
    TrackedInstance,
    create_proxy,
    get_or_create_proxy_type,
    get_tracker,
    is_proxy,
    is_proxy_type,
)

# Storage
from changetrack.storage import (
    AccessMode,
    ChangeListener,
    PropertyChanged,
    TrackedView,
    ValueStore,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "PropertyId",
    "PropertyRef",
    "resolve_property",
    "ChangeTrackingError",
    "ArgumentError",
    "AccessViolationError",
    "PropertyNotSetError",
    "UnsupportedOperationError",
    # Storage
    "AccessMode",
    "ValueStore",
    "TrackedView",
    "PropertyChanged",
    "ChangeListener",
    # Proxies
    "ProxyTypeFactory",
    "get_or_create_proxy_type",
    "create_proxy",
    "get_tracker",
    "is_proxy",
    "is_proxy_type",
    "TrackedInstance",
    # Config
    "ChangeTrackingSettings",
    "get_settings",
]
