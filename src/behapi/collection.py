"""Tag-based collection of services and the context initializer chain."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from behapi.services.descriptor import Reference
from behapi.services.protocols import ContextInitializer, TagPredicate
from behapi.services.registry import ServiceRegistry

logger = logging.getLogger(__name__)

INITIALIZER_TAG = "context.initializer"
BAG_TAG = "behapi.bag"

_MISSING = object()


def always(attributes: Mapping[str, Any]) -> bool:
    """Predicate accepting every tag."""
    return True


def attribute_is(name: str, expected: Any) -> TagPredicate:
    """Predicate accepting tags whose attribute equals ``expected`` exactly.

    The type must match too, so ``reset=1`` or ``reset="true"`` do not satisfy
    ``attribute_is("reset", True)``. A missing attribute never matches.
    """

    def predicate(attributes: Mapping[str, Any]) -> bool:
        value = attributes.get(name, _MISSING)
        return type(value) is type(expected) and value == expected

    predicate.__name__ = f"attribute_is({name}={expected!r})"
    return predicate


class TaggedCollector:
    """Collects references to every service matching a tag and predicate."""

    def __init__(self, registry: ServiceRegistry) -> None:
        self._registry = registry

    def collect(
        self, tag_name: str, predicate: TagPredicate = always
    ) -> list[Reference]:
        """Return references in registration order, one per matching tag."""
        references = [
            Reference(match.id)
            for match in self._registry.find_tagged(tag_name, predicate)
        ]
        logger.debug(
            "Collected %d service(s) tagged '%s': %s",
            len(references),
            tag_name,
            [ref.id for ref in references],
        )
        return references


class InitializerChain:
    """Ordered context initializers applied to every new scenario context.

    The order is the collection order; entries are never reordered or
    de-duplicated. Instances are resolved lazily on first use.
    """

    def __init__(self, registry: ServiceRegistry, references: Sequence[Reference]) -> None:
        self._registry = registry
        self._references = tuple(references)

    @classmethod
    def collect(cls, registry: ServiceRegistry) -> InitializerChain:
        """Build the chain from every service tagged ``context.initializer``."""
        return cls(registry, TaggedCollector(registry).collect(INITIALIZER_TAG))

    @property
    def ids(self) -> list[str]:
        return [ref.id for ref in self._references]

    @property
    def references(self) -> tuple[Reference, ...]:
        return self._references

    def __len__(self) -> int:
        return len(self._references)

    def __iter__(self) -> Iterator[ContextInitializer]:
        for ref in self._references:
            yield self._registry.get(ref.id)

    def initialize(self, context: Any) -> None:
        """Apply every initializer to the context, in order."""
        for ref in self._references:
            initializer = self._registry.get(ref.id)
            logger.debug("Applying context initializer: %s", ref.id)
            initializer.initialize_context(context)
