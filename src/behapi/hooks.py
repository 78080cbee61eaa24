"""behave environment hooks.

Usage in ``features/environment.py``::

    from behapi import hooks

    def before_all(context):
        hooks.install(context, properties=load_my_config())

    def before_scenario(context, scenario):
        hooks.before_scenario(context, scenario)

    def after_scenario(context, scenario):
        hooks.after_scenario(context, scenario)

    def after_all(context):
        hooks.after_all(context)

Passing ``-D behapi.debug=true`` on the behave command line enables the debug
reporter.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from behapi.composition import DEBUG, Composition, compose
from behapi.errors import ResetFailure

logger = logging.getLogger(__name__)

CONTEXT_ATTRIBUTE = "behapi"
DEBUG_USERDATA_KEY = "behapi.debug"

_TRUTHY = {"1", "true", "yes", "on"}


def install(
    context: Any,
    composition: Composition | None = None,
    properties: Mapping[str, Any] | None = None,
    debug: bool | None = None,
) -> Composition:
    """Compose (unless given a composition) and attach it to the root context.

    Raises:
        ValueError: If neither a composition nor properties are given
        ConfigurationError: If the properties are invalid

    """
    if composition is None:
        if properties is None:
            msg = "install() needs either a composition or configuration properties"
            raise ValueError(msg)
        composition = compose(properties)

    if debug is None:
        debug = _debug_requested(context)
    if debug:
        composition.get(DEBUG).enable()

    setattr(context, CONTEXT_ATTRIBUTE, composition)
    return composition


def before_scenario(context: Any, scenario: Any = None) -> None:
    _composition(context).initialize_context(context)


def after_scenario(context: Any, scenario: Any = None) -> list[ResetFailure]:
    failures = _composition(context).finish_scenario()
    if failures:
        logger.warning(
            "%d bag(s) failed to reset after scenario %s",
            len(failures),
            getattr(scenario, "name", "<unknown>"),
        )
    return failures


def after_all(context: Any) -> None:
    _composition(context).close()


def _composition(context: Any) -> Composition:
    composition = getattr(context, CONTEXT_ATTRIBUTE, None)
    if composition is None:
        msg = "behapi is not installed on this context; call hooks.install() in before_all"
        raise RuntimeError(msg)
    return composition


def _debug_requested(context: Any) -> bool:
    userdata = getattr(getattr(context, "config", None), "userdata", None) or {}
    value = userdata.get(DEBUG_USERDATA_KEY, False)
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY
