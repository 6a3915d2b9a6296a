"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from changetrack.config import reset_settings
from changetrack.proxy import ProxyTypeFactory


class Foo:
    """Base with overridable properties and a one-argument constructor."""

    def __init__(self, age: int) -> None:
        self._name = ""
        self._age = 0
        self.age = age

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def age(self) -> int:
        return self._age

    @age.setter
    def age(self, value: int) -> None:
        self._age = value

    @property
    def summary(self) -> str:
        return f"{self._name} ({self._age})"


class BasicPOCO:
    """Default-constructible base with two tracked properties."""

    def __init__(self) -> None:
        self._string_value: str | None = None
        self._int_value = 0

    @property
    def string_value(self) -> str | None:
        return self._string_value

    @string_value.setter
    def string_value(self, value: str | None) -> None:
        self._string_value = value

    @property
    def int_value(self) -> int:
        return self._int_value

    @int_value.setter
    def int_value(self, value: int) -> None:
        self._int_value = value


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from CHANGETRACK_* variables and cached settings."""
    for var in ("CHANGETRACK_LOG_HISTORY", "CHANGETRACK_TRACKER_ACCESS_MODE", "CHANGETRACK_PROXY_NAME_SUFFIX"):
        monkeypatch.delenv(var, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def factory():
    """Fresh ProxyTypeFactory with an empty cache."""
    return ProxyTypeFactory()


@pytest.fixture
def foo_cls():
    return Foo


@pytest.fixture
def poco_cls():
    return BasicPOCO
