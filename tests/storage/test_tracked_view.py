"""Tests for TrackedView: property-reference facade over a ValueStore."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from changetrack import (
    AccessMode,
    AccessViolationError,
    ArgumentError,
    TrackedView,
    UnsupportedOperationError,
    ValueStore,
)


class BasicPOCO:
    string_value: str | None = None
    int_value: int = 0

    @property
    def shout(self) -> str:
        return (self.string_value or "").upper()


@dataclass
class Point:
    x: float
    y: float = 0.0


@pytest.fixture
def view():
    return TrackedView(BasicPOCO)


def test_set_with_lambda_reports_property_name(view):
    """One set through a lambda reference yields one value under the right name."""
    view.set(lambda c: c.string_value, "New value!")

    ret = list(view.get_values())

    assert len(ret) == 1
    assert ret[0][0].name == "string_value"
    assert ret[0][1] == "New value!"


def test_reference_forms_are_interchangeable(view):
    view.set("int_value", 3)

    assert view.get(lambda c: c.int_value) == 3
    assert view[view.resolve("int_value")] == 3
    assert view.has_value("int_value")
    assert "int_value" in view


def test_contains_is_false_for_unknown_reference(view):
    assert "nope" not in view
    assert "string_value" not in view


def test_unknown_reference_rejected(view):
    with pytest.raises(ArgumentError):
        view.set("nope", 1)
    with pytest.raises(ArgumentError):
        view.get(lambda c: c.nope.deeper)


def test_try_get_and_set_if_empty(view):
    assert view.try_get("int_value") == (False, None)

    view.set_if_empty("int_value", 1).set_if_empty("int_value", 2)

    assert view.try_get("int_value") == (True, 1)


def test_history_through_view():
    view = TrackedView(BasicPOCO, log_history=True)
    view.set(lambda c: c.string_value, "First new value!")
    view.set(lambda c: c.string_value, "Second new value!")

    assert view.get_history(lambda c: c.string_value) == ("First new value!", "Second new value!")

    view.clear_history(lambda c: c.string_value)
    assert view.get_history("string_value") == ()
    assert view.get("string_value") == "Second new value!"


def test_history_disabled_through_view(view):
    with pytest.raises(UnsupportedOperationError):
        view.get_history("string_value")


def test_clear_through_view(view):
    view["string_value"] = "a"
    view["int_value"] = 1

    del view["string_value"]
    assert len(view) == 1

    view.clear()
    assert len(view) == 0


def test_reference_copy_is_view_over_shared_store(view):
    ro = view.make_reference_copy(AccessMode.READ_ONLY)
    view.set("int_value", 5)

    assert isinstance(ro, TrackedView)
    assert ro.tracked_type is BasicPOCO
    assert ro.get("int_value") == 5
    with pytest.raises(AccessViolationError):
        ro.set("int_value", 6)
    with pytest.raises(ArgumentError):
        ro.make_reference_copy(AccessMode.NO_SET)


def test_wraps_existing_store():
    store = ValueStore(log_history=True)
    view = TrackedView(BasicPOCO, store=store)
    view.set("int_value", 2)

    assert view.store is store
    assert view.log_history
    assert store.get(view.resolve("int_value")) == 2


def test_get_property_type(view):
    assert view.get_property_type("int_value") == "int"
    assert view.get_property_type(BasicPOCO.shout) == "str"


def test_load_to_instance_applies_values():
    view = TrackedView(Point)
    view.set("x", 3.0).set("y", 4.0)

    target = Point(0.0)
    returned = view.load_to_instance(target)

    assert returned is target
    assert (target.x, target.y) == (3.0, 4.0)


def test_load_to_instance_only_touches_stored_values():
    view = TrackedView(Point)
    view.set("y", 9.0)

    target = view.load_to_instance(Point(1.0, 2.0))

    assert (target.x, target.y) == (1.0, 9.0)


def test_load_to_instance_rejects_foreign_type(view):
    with pytest.raises(ArgumentError, match="Cannot load"):
        view.load_to_instance(Point(1.0))


def test_load_to_instance_rejects_read_only_attribute_before_assigning():
    """CRITICAL: A failed load leaves the target untouched."""
    view = TrackedView(BasicPOCO)
    view.set("int_value", 7).set("shout", "LOUD")

    target = BasicPOCO()
    with pytest.raises(ArgumentError, match="not a writable attribute"):
        view.load_to_instance(target)

    assert target.int_value == 0


def test_of_skips_read_only_properties():
    source = BasicPOCO()
    source.string_value = "hi"

    view = TrackedView.of(source)

    assert view.get("string_value") == "hi"
    assert not view.has_value(BasicPOCO.shout)
    assert view.load_to_instance(BasicPOCO()).shout == "HI"


def test_of_seeds_from_instance():
    source = Point(1.5, 2.5)

    view = TrackedView.of(source, log_history=True)

    assert view.tracked_type is Point
    assert dict((pid.name, value) for pid, value in view.get_values()) == {"x": 1.5, "y": 2.5}
    assert view.get_history("x") == (1.5,)


def test_of_skips_attributes_without_values():
    class Partial:
        present: int
        absent: int

    source = Partial()
    source.present = 1

    view = TrackedView.of(source)

    assert view.has_value("present")
    assert not view.has_value("absent")


def test_subscribe_through_view(view):
    events = []
    view.subscribe(events.append)
    view.set("int_value", 4)

    assert [(e.property.name, e.value) for e in events] == [("int_value", 4)]
    assert view.unsubscribe(events.append)
