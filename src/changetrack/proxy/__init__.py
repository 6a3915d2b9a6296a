"""Generated change-tracking proxy classes and their instance facade."""

from changetrack.proxy.factory import (
    ProxyTypeFactory,
    build_proxy_type,
    get_factory,
    get_or_create_proxy_type,
    is_proxy_type,
)
from changetrack.proxy.instance import TrackedInstance, create_proxy, get_tracker, is_proxy
from changetrack.proxy.members import TrackedMember, TrackedProperty, discover_members

__all__ = [
    # Factory
    "ProxyTypeFactory",
    "build_proxy_type",
    "get_factory",
    "get_or_create_proxy_type",
    "is_proxy_type",
    "TrackedMember",
    "TrackedProperty",
    "discover_members",
    # Instances
    "TrackedInstance",
    "create_proxy",
    "get_tracker",
    "is_proxy",
]
