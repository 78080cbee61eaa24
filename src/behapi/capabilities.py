"""Environment capability facts and the conditional wiring policy.

Optional registry branches are gated on facts computed once, up front. The
composition root asks the policy for a ``WiringDecisions`` object and branches
every dependent registration off that single object.
"""

from __future__ import annotations

import importlib.util
import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Self

logger = logging.getLogger(__name__)

TEMPLATING = "templating"


@dataclass(frozen=True)
class EnvironmentFacts:
    """Capability facts about the running environment.

    Attributes:
        templating_available: Whether the optional jinja2 library is importable

    """

    templating_available: bool = False

    @classmethod
    def detect(cls) -> Self:
        """Probe the environment once and record what is available."""
        facts = cls(templating_available=_module_available("jinja2"))
        logger.debug("Detected environment facts: %s", facts)
        return facts

    def as_dict(self) -> dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _module_available(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False


@dataclass(frozen=True)
class WiringDecisions:
    """Outcome of the policy for every optional feature."""

    enabled: frozenset[str] = frozenset()

    def is_enabled(self, feature: str) -> bool:
        return feature in self.enabled

    @property
    def templating(self) -> bool:
        return self.is_enabled(TEMPLATING)


class ConditionalWiringPolicy:
    """Decides which optional registration branches run.

    Each feature maps to the fact it requires. A feature is enabled when that
    fact is true.
    """

    DEFAULT_REQUIREMENTS: Mapping[str, str] = MappingProxyType(
        {TEMPLATING: "templating_available"}
    )

    def __init__(self, requirements: Mapping[str, str] | None = None) -> None:
        self._requirements = dict(
            self.DEFAULT_REQUIREMENTS if requirements is None else requirements
        )

    @property
    def features(self) -> list[str]:
        return list(self._requirements)

    def should_enable(self, feature: str, facts: EnvironmentFacts) -> bool:
        """Check whether a feature's registration branch should run.

        Raises:
            ValueError: If the feature or its required fact is unknown

        """
        try:
            fact = self._requirements[feature]
        except KeyError:
            msg = f"Unknown optional feature: {feature}"
            raise ValueError(msg) from None
        values = facts.as_dict()
        if fact not in values:
            msg = f"Feature '{feature}' requires unknown fact '{fact}'"
            raise ValueError(msg)
        return values[fact]

    def decide(self, facts: EnvironmentFacts) -> WiringDecisions:
        """Evaluate every feature once."""
        enabled = frozenset(
            feature for feature in self._requirements if self.should_enable(feature, facts)
        )
        for feature in self._requirements:
            if feature not in enabled:
                logger.info("Optional feature '%s' disabled: requirement not met", feature)
        return WiringDecisions(enabled)
