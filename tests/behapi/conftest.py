"""Shared fixtures for behapi tests."""

from types import SimpleNamespace

import pytest

from behapi.capabilities import EnvironmentFacts


class RecordingBag:
    """Resettable service recording how many times it was reset."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.reset_calls = 0

    def reset(self) -> None:
        self.reset_calls += 1
        if self.fail:
            raise RuntimeError("bag exploded")


class RecordingInitializer:
    """Initializer appending its name to ``context.applied``."""

    def __init__(self, name: str) -> None:
        self.name = name

    def initialize_context(self, context) -> None:
        context.applied = [*getattr(context, "applied", []), self.name]


@pytest.fixture
def make_bag() -> type[RecordingBag]:
    return RecordingBag


@pytest.fixture
def make_initializer() -> type[RecordingInitializer]:
    return RecordingInitializer


@pytest.fixture
def valid_properties() -> dict:
    return {
        "baseUrl": "http://api.test",
        "environment": "test",
        "app": {"id": "X", "secret": "Y"},
    }


@pytest.fixture
def without_templating() -> EnvironmentFacts:
    return EnvironmentFacts(templating_available=False)


@pytest.fixture
def with_templating() -> EnvironmentFacts:
    return EnvironmentFacts(templating_available=True)


@pytest.fixture
def context() -> SimpleNamespace:
    """Stand-in for a behave scenario context."""
    return SimpleNamespace()
