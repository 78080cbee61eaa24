"""Tests for the behave environment hooks."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from behapi import hooks
from behapi.collection import BAG_TAG
from behapi.composition import DEBUG, HTTP_HISTORY, compose
from behapi.errors import ConfigurationError
from behapi.services import ServiceDescriptor


def _behave_context(**userdata) -> SimpleNamespace:
    return SimpleNamespace(config=SimpleNamespace(userdata=userdata))


class TestInstall:
    """Test suite for hooks.install()."""

    def test_install_composes_from_properties(self, valid_properties) -> None:
        context = _behave_context()

        composition = hooks.install(context, properties=valid_properties)

        assert context.behapi is composition
        assert composition.config.base_url == "http://api.test"

    def test_install_requires_composition_or_properties(self) -> None:
        with pytest.raises(ValueError, match="composition or configuration"):
            hooks.install(_behave_context())

    def test_install_propagates_configuration_errors(self) -> None:
        with pytest.raises(ConfigurationError):
            hooks.install(_behave_context(), properties={"baseUrl": ""})

    @pytest.mark.parametrize(("value", "expected"), [("true", True), ("0", False), (True, True)])
    def test_debug_enabled_from_userdata(self, valid_properties, without_templating, value, expected) -> None:
        composition = compose(valid_properties, facts=without_templating)

        hooks.install(_behave_context(**{"behapi.debug": value}), composition)

        assert composition.get(DEBUG).enabled is expected

    def test_debug_disabled_without_userdata(self, valid_properties, without_templating) -> None:
        composition = compose(valid_properties, facts=without_templating)

        hooks.install(SimpleNamespace(), composition)

        assert composition.get(DEBUG).enabled is False


class TestScenarioHooks:
    def test_before_scenario_initializes_context(self, valid_properties, without_templating) -> None:
        # Arrange
        context = _behave_context()
        hooks.install(context, compose(valid_properties, facts=without_templating))

        # Act
        hooks.before_scenario(context, SimpleNamespace(name="login"))

        # Assert
        assert context.history is context.behapi.get(HTTP_HISTORY)
        assert context.credentials.id == "X"

    def test_after_scenario_resets_bags_and_reports_failures(self, valid_properties, without_templating, make_bag) -> None:
        # Arrange
        extra = {
            "broken": ServiceDescriptor(make_bag, keyword_arguments={"fail": True}).with_tag(
                BAG_TAG, reset=True
            ),
            "ok": ServiceDescriptor(make_bag).with_tag(BAG_TAG, reset=True),
        }
        context = _behave_context()
        hooks.install(
            context, compose(valid_properties, facts=without_templating, extra_services=extra)
        )

        # Act
        failures = hooks.after_scenario(context, SimpleNamespace(name="failing scenario"))

        # Assert
        assert len(failures) == 1
        assert context.behapi.get("ok").reset_calls == 1

    def test_hooks_require_install(self) -> None:
        with pytest.raises(RuntimeError, match="not installed"):
            hooks.before_scenario(SimpleNamespace())

    def test_after_all_closes_composition(self) -> None:
        composition = MagicMock()
        context = SimpleNamespace(behapi=composition)

        hooks.after_all(context)

        composition.close.assert_called_once_with()
