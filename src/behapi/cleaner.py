"""Scenario teardown: resets every collected bag after each scenario."""

from __future__ import annotations

import logging
from typing import Any

from behapi.errors import ResetFailure
from behapi.services.protocols import Resettable

logger = logging.getLogger(__name__)


class Cleaner:
    """Holds the resettable bags and clears them when a scenario finishes.

    Cleanup is fail-open: a bag failing to reset is reported and the remaining
    bags are still reset, whatever the scenario outcome.
    """

    def __init__(self, *bags: Resettable) -> None:
        self._bags: list[Resettable] = list(bags)

    def add_bag(self, bag: Resettable) -> None:
        self._bags.append(bag)

    @property
    def bags(self) -> tuple[Resettable, ...]:
        return tuple(self._bags)

    def clean(self) -> list[ResetFailure]:
        """Reset every bag in collection order.

        Returns:
            One ResetFailure per bag whose reset raised, empty on success

        """
        failures: list[ResetFailure] = []
        for bag in self._bags:
            try:
                bag.reset()
            except Exception as e:
                failure = ResetFailure(bag, e)
                logger.warning("%s", failure, exc_info=e)
                failures.append(failure)
        logger.debug(
            "Reset %d bag(s), %d failure(s)", len(self._bags), len(failures)
        )
        return failures

    def on_scenario_finished(self, *event: Any) -> list[ResetFailure]:
        """Event hook for the runner; the event payload is ignored."""
        return self.clean()
