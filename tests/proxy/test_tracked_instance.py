"""Tests for TrackedInstance, create_proxy and get_tracker."""

from __future__ import annotations

import pytest

from changetrack import (
    AccessMode,
    AccessViolationError,
    ArgumentError,
    TrackedInstance,
    TrackedView,
    create_proxy,
    get_tracker,
    is_proxy,
)


def test_default_tracker_is_read_only(poco_cls):
    tracked = TrackedInstance(poco_cls)

    assert tracked.tracker.access_mode is AccessMode.READ_ONLY
    assert is_proxy(tracked.instance)


def test_tracker_rejects_direct_writes(poco_cls):
    """Writes must go through the instance so tracking cannot be bypassed."""
    tracked = TrackedInstance(poco_cls)
    tracked.instance.string_value = "New value!"

    with pytest.raises(AccessViolationError):
        tracked.tracker.set(lambda c: c.string_value, "Uh oh!")

    assert tracked.tracker.get("string_value") == "New value!"


def test_tracker_sees_later_writes(poco_cls):
    tracked = TrackedInstance(poco_cls)
    tracker = tracked.tracker

    tracked.instance.string_value = "New value!"

    assert len(list(tracker.get_values())) == 1


def test_read_only_tracker(poco_cls):
    tracked = TrackedInstance(poco_cls, access_mode=AccessMode.READ_ONLY)
    tracked.instance.int_value = 3

    with pytest.raises(AccessViolationError):
        tracked.tracker.clear()
    assert tracked.tracker.get("int_value") == 3


@pytest.mark.parametrize("mode", [AccessMode.READ_WRITE, AccessMode.NO_SET])
def test_looser_than_read_only_tracker_rejected(poco_cls, mode):
    """CRITICAL: The facade never hands out a handle that can set or clear."""
    with pytest.raises(ArgumentError, match="must be read_only"):
        TrackedInstance(poco_cls, access_mode=mode)


def test_clearing_goes_through_get_tracker(poco_cls):
    tracked = TrackedInstance(poco_cls)
    tracked.instance.int_value = 3

    get_tracker(tracked.instance).clear()

    assert len(tracked.tracker) == 0


def test_constructor_arguments_forwarded(foo_cls):
    tracked = TrackedInstance(foo_cls, age=40)

    assert tracked.instance.age == 40
    assert tracked.tracker.get("age") == 40


def test_history_flag(poco_cls):
    tracked = TrackedInstance(poco_cls, log_history=True)

    tracked.instance.string_value = "First new value!"
    tracked.instance.string_value = "Second new value!"

    assert tracked.tracker.get_history(lambda c: c.string_value) == (
        "First new value!",
        "Second new value!",
    )


def test_snapshot_seeds_instance_without_tracking(foo_cls):
    """CRITICAL: Seeding writes are applied but not left as tracked state."""
    snapshot = TrackedView(foo_cls)
    snapshot.set("name", "Zed").set("age", 77)

    tracked = TrackedInstance(foo_cls, 3, snapshot=snapshot, log_history=True)

    assert (tracked.instance.name, tracked.instance.age) == ("Zed", 77)
    assert len(tracked.tracker) == 0
    assert tracked.tracker.get_history("name") == ()
    assert tracked.tracker.get_history("age") == ()

    tracked.instance.name = "Amy"
    assert list(tracked.tracker.get_values()) == [(tracked.tracker.resolve("name"), "Amy")]
    assert tracked.tracker.get_history("name") == ("Amy",)


def test_snapshot_from_previous_tracker(foo_cls):
    first = TrackedInstance(foo_cls, 1)
    first.instance.name = "Ann"

    second = TrackedInstance(foo_cls, 2, snapshot=first.tracker)

    assert second.instance.name == "Ann"
    # The snapshot's age (1) is loaded over the constructor's 2
    assert second.instance.age == 1
    assert len(second.tracker) == 0


def test_snapshot_captured_from_plain_instance(foo_cls):
    """A view seeded from an object with read-only properties loads cleanly."""
    source = foo_cls(5)
    source.name = "Ann"

    snapshot = TrackedView.of(source)
    tracked = TrackedInstance(foo_cls, 1, snapshot=snapshot)

    assert not snapshot.has_value("summary")
    assert (tracked.instance.name, tracked.instance.age) == ("Ann", 5)
    assert tracked.instance.summary == "Ann (5)"
    assert len(tracked.tracker) == 0


def test_snapshot_of_unrelated_type_rejected(foo_cls, poco_cls):
    with pytest.raises(ArgumentError, match="cannot seed"):
        TrackedInstance(poco_cls, snapshot=TrackedView(foo_cls))


def test_create_proxy(foo_cls):
    instance = create_proxy(foo_cls, 12, log_history=True)

    assert isinstance(instance, foo_cls)
    assert get_tracker(instance).get_history("age") == (12,)


def test_get_tracker_rejects_plain_objects(foo_cls):
    with pytest.raises(ArgumentError, match="not created from a proxy class"):
        get_tracker(foo_cls(1))


def test_get_tracker_rejects_writable_mode(foo_cls):
    with pytest.raises(ArgumentError):
        get_tracker(create_proxy(foo_cls, 1), AccessMode.READ_WRITE)


def test_get_tracker_rejects_uninitialized_proxy(foo_cls):
    proxy_cls = type(create_proxy(foo_cls, 1))
    bare = proxy_cls.__new__(proxy_cls)

    with pytest.raises(ArgumentError, match="never initialized"):
        get_tracker(bare)


def test_trackers_share_embedded_store(foo_cls):
    instance = create_proxy(foo_cls, 1)
    no_set = get_tracker(instance)
    read_only = get_tracker(instance, AccessMode.READ_ONLY)

    no_set.clear()
    instance.name = "Ann"

    assert read_only.get("name") == "Ann"
    assert not read_only.has_value("age")


def test_tracker_mode_from_settings(monkeypatch, foo_cls):
    from changetrack.config import reset_settings

    tracked = TrackedInstance(foo_cls, 1)
    assert get_tracker(tracked.instance).access_mode is AccessMode.NO_SET

    monkeypatch.setenv("CHANGETRACK_TRACKER_ACCESS_MODE", "read_only")
    reset_settings()

    assert get_tracker(tracked.instance).access_mode is AccessMode.READ_ONLY
    # The facade tracker does not follow the setting
    assert tracked.tracker.access_mode is AccessMode.READ_ONLY


def test_history_default_from_settings(monkeypatch, foo_cls):
    from changetrack.config import reset_settings

    monkeypatch.setenv("CHANGETRACK_LOG_HISTORY", "true")
    reset_settings()

    tracked = TrackedInstance(foo_cls, 5)

    assert tracked.tracker.log_history
    assert tracked.tracker.get_history("age") == (5,)
