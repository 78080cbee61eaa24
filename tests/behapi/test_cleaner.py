"""Tests for the Cleaner and the reset coordinator wiring."""

import pytest

from behapi.cleaner import Cleaner
from behapi.collection import BAG_TAG
from behapi.composition import CLEANER, wire_reset_coordinator
from behapi.errors import ResetFailure, UnknownServiceError
from behapi.services import Reference, ServiceDescriptor, ServiceRegistry


class TestCleaner:
    """Test suite for Cleaner."""

    def test_clean_resets_every_bag(self, make_bag) -> None:
        # Arrange
        bags = [make_bag(), make_bag()]
        cleaner = Cleaner(bags[0])
        cleaner.add_bag(bags[1])

        # Act
        failures = cleaner.clean()

        # Assert
        assert failures == []
        assert [bag.reset_calls for bag in bags] == [1, 1]

    def test_failing_bag_does_not_stop_the_others(self, make_bag) -> None:
        """Verify fail-open cleanup: every bag is reset even when one raises."""
        # Arrange
        bags = [make_bag(), make_bag(fail=True), make_bag()]
        cleaner = Cleaner(*bags)

        # Act
        failures = cleaner.on_scenario_finished("scenario-finished-event")

        # Assert
        assert sum(bag.reset_calls for bag in bags) == 3
        assert len(failures) == 1
        assert isinstance(failures[0], ResetFailure)
        assert failures[0].bag is bags[1]
        assert isinstance(failures[0].original_error, RuntimeError)
        assert str(failures[0]) == "Failed to reset RecordingBag: bag exploded"

    def test_bags_kept_in_order(self, make_bag) -> None:
        first, second = make_bag(), make_bag()
        cleaner = Cleaner()
        cleaner.add_bag(first)
        cleaner.add_bag(second)

        assert cleaner.bags == (first, second)


class TestResetCoordinatorWiring:
    """Test suite for wire_reset_coordinator()."""

    def test_only_bags_opting_in_are_held(self, make_bag) -> None:
        """Verify three reset=True bags are held and the reset=False one is not."""
        # Arrange
        registry = ServiceRegistry()
        registry.register(CLEANER, ServiceDescriptor(Cleaner))
        for name in ("one", "two", "three"):
            registry.register(name, ServiceDescriptor(make_bag).with_tag(BAG_TAG, reset=True))
        registry.register("kept", ServiceDescriptor(make_bag).with_tag(BAG_TAG, reset=False))
        registry.register("untagged_reset", ServiceDescriptor(make_bag).with_tag(BAG_TAG))

        # Act
        wired = wire_reset_coordinator(registry)
        cleaner = registry.get(CLEANER)

        # Assert
        assert wired == [Reference("one"), Reference("two"), Reference("three")]
        assert cleaner.bags == (
            registry.get("one"),
            registry.get("two"),
            registry.get("three"),
        )
        assert not registry.instantiated("kept")

    def test_reset_count_matches_bags_despite_failure(self, make_bag) -> None:
        # Arrange
        registry = ServiceRegistry()
        registry.register(CLEANER, ServiceDescriptor(Cleaner))
        registry.register("ok1", ServiceDescriptor(make_bag).with_tag(BAG_TAG, reset=True))
        registry.register(
            "broken",
            ServiceDescriptor(make_bag, keyword_arguments={"fail": True}).with_tag(
                BAG_TAG, reset=True
            ),
        )
        registry.register("ok2", ServiceDescriptor(make_bag).with_tag(BAG_TAG, reset=True))
        wire_reset_coordinator(registry)

        # Act
        failures = registry.get(CLEANER).clean()

        # Assert
        calls = [registry.get(name).reset_calls for name in ("ok1", "broken", "ok2")]
        assert calls == [1, 1, 1]
        assert len(failures) == 1

    def test_missing_coordinator_is_a_composition_error(self, make_bag) -> None:
        registry = ServiceRegistry()
        registry.register("bag", ServiceDescriptor(make_bag).with_tag(BAG_TAG, reset=True))

        with pytest.raises(UnknownServiceError):
            wire_reset_coordinator(registry)
