"""Composition root: builds the behapi service registry from configuration.

Composition runs in three phases:

1. Validation: the raw configuration becomes a ``CompositionConfig``; any
   violation aborts before a single service is registered.
2. Registration: every service and initializer is registered. Optional
   branches are decided once, up front, by the ``ConditionalWiringPolicy``.
3. Processing: tagged services are collected into the initializer chain and
   the cleaner, then the registry is frozen.

Nothing is instantiated during composition; services are built on first use.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import redis

from behapi.capabilities import ConditionalWiringPolicy, EnvironmentFacts, WiringDecisions
from behapi.cleaner import Cleaner
from behapi.collection import (
    BAG_TAG,
    INITIALIZER_TAG,
    InitializerChain,
    TaggedCollector,
    attribute_is,
)
from behapi.configuration import CompositionConfig
from behapi.errors import ResetFailure
from behapi.initializers import (
    ApiInitializer,
    AuthenticationInitializer,
    KeyValueInitializer,
    TemplatingInitializer,
)
from behapi.services import Reference, ServiceDescriptor, ServiceRegistry
from behapi.tools.debug import DebugReporter
from behapi.tools.history import History
from behapi.tools.http import HttpClientFactory

logger = logging.getLogger(__name__)

DEBUG = "behapi.debug"
HTTP_HISTORY = "http.history"
HTTP_CLIENT = "http.client"
KV_CLIENT = "kv.client"
CLEANER = "behapi.cleaner"
TEMPLATING_LOADER = "templating.loader"
TEMPLATING = "templating"

API_INITIALIZER = "behapi.initializer.api"
KV_INITIALIZER = "behapi.initializer.kv"
AUTHENTICATION_INITIALIZER = "behapi.initializer.authentication"
TEMPLATING_INITIALIZER = "behapi.initializer.templating"

DEFAULT_CACHE_DIR = Path(".behapi") / "cache"


@dataclass(frozen=True)
class Composition:
    """A composed, frozen registry plus what the runner needs from it."""

    config: CompositionConfig
    facts: EnvironmentFacts
    decisions: WiringDecisions
    registry: ServiceRegistry
    initializers: InitializerChain

    def get(self, service_id: str) -> Any:
        return self.registry.get(service_id)

    @property
    def cleaner(self) -> Cleaner:
        return self.registry.get(CLEANER)

    def initialize_context(self, context: Any) -> None:
        """Prepare a fresh scenario context; call before the scenario's steps."""
        self.initializers.initialize(context)

    def finish_scenario(self) -> list[ResetFailure]:
        """Reset every bag; call after each scenario, passed or failed."""
        return self.cleaner.on_scenario_finished()

    def close(self) -> None:
        """Close network clients that were actually instantiated."""
        for service_id in (HTTP_CLIENT, KV_CLIENT):
            if self.registry.instantiated(service_id):
                logger.debug("Closing %s", service_id)
                self.registry.get(service_id).close()


def compose(
    config: CompositionConfig | Mapping[str, Any],
    *,
    facts: EnvironmentFacts | None = None,
    policy: ConditionalWiringPolicy | None = None,
    extra_services: Mapping[str, ServiceDescriptor] | None = None,
    cache_dir: Path | str | None = None,
) -> Composition:
    """Build the behapi registry.

    Args:
        config: Validated configuration, or raw properties to validate
        facts: Environment facts; detected when omitted
        policy: Wiring policy for optional features
        extra_services: Additional descriptors registered before processing,
            e.g. extra bags or initializers
        cache_dir: Root directory for engine caches

    Returns:
        The composed registry and initializer chain

    Raises:
        ConfigurationError: If the configuration is invalid
        CompositionError: If the registry cannot be assembled

    """
    if not isinstance(config, CompositionConfig):
        config = CompositionConfig.from_properties(dict(config))

    facts = facts if facts is not None else EnvironmentFacts.detect()
    decisions = (policy or ConditionalWiringPolicy()).decide(facts)

    registry = ServiceRegistry()
    load_debug(registry, config)
    load_http(registry, config)
    load_kv(registry)
    load_cleaner(registry)
    if decisions.templating:
        load_templating(registry, config, Path(cache_dir or DEFAULT_CACHE_DIR))
    load_initializers(registry, config, decisions)

    for service_id, descriptor in (extra_services or {}).items():
        registry.register(service_id, descriptor)

    initializers = process(registry)
    registry.freeze()

    logger.info(
        "Composed %d service(s) with %d context initializer(s) for %s (%s)",
        len(registry),
        len(initializers),
        config.base_url,
        config.environment,
    )
    return Composition(config, facts, decisions, registry, initializers)


def load_debug(registry: ServiceRegistry, config: CompositionConfig) -> None:
    registry.register(DEBUG, ServiceDescriptor(DebugReporter, arguments=(config.debug_formatter,)))


def load_http(registry: ServiceRegistry, config: CompositionConfig) -> None:
    """Register the history recorder and the client built through its factory."""
    # Only the last exchange is kept
    registry.register(
        HTTP_HISTORY,
        ServiceDescriptor(History, arguments=(1,)).with_tag(BAG_TAG, reset=True),
    )

    factory = ServiceDescriptor(HttpClientFactory).with_call(
        "add_subscriber", Reference(HTTP_HISTORY)
    )
    registry.register(
        HTTP_CLIENT,
        ServiceDescriptor.from_factory_method(factory, "get_client", config.base_url),
    )


def load_kv(registry: ServiceRegistry) -> None:
    # TODO: expose host/port/db once the configuration grows a kv block
    registry.register(KV_CLIENT, ServiceDescriptor(redis.Redis))


def load_cleaner(registry: ServiceRegistry) -> None:
    registry.register(CLEANER, ServiceDescriptor(Cleaner))


def load_templating(
    registry: ServiceRegistry, config: CompositionConfig, cache_dir: Path
) -> None:
    registry.register(TEMPLATING_LOADER, ServiceDescriptor(_create_template_loader))
    registry.register(
        TEMPLATING,
        ServiceDescriptor(
            _create_template_environment,
            arguments=(Reference(TEMPLATING_LOADER),),
            keyword_arguments={
                "debug": config.debug,
                "cache_dir": cache_dir / config.environment / "templates",
                "autoescape": False,
            },
        ),
    )


def load_initializers(
    registry: ServiceRegistry, config: CompositionConfig, decisions: WiringDecisions
) -> None:
    """Register context initializers; their order is the chain order."""
    registry.register(
        API_INITIALIZER,
        ServiceDescriptor(
            ApiInitializer,
            arguments=(
                Reference(HTTP_CLIENT),
                Reference(HTTP_HISTORY),
                Reference(DEBUG),
                config.environment,
            ),
        ).with_tag(INITIALIZER_TAG),
    )
    registry.register(
        KV_INITIALIZER,
        ServiceDescriptor(KeyValueInitializer, arguments=(Reference(KV_CLIENT),)).with_tag(
            INITIALIZER_TAG
        ),
    )
    registry.register(
        AUTHENTICATION_INITIALIZER,
        ServiceDescriptor(
            AuthenticationInitializer, arguments=(config.app.id, config.app.secret)
        ).with_tag(INITIALIZER_TAG),
    )

    if decisions.templating:
        registry.register(
            TEMPLATING_INITIALIZER,
            ServiceDescriptor(TemplatingInitializer, arguments=(Reference(TEMPLATING),)).with_tag(
                INITIALIZER_TAG
            ),
        )


def process(registry: ServiceRegistry) -> InitializerChain:
    """Composition pass: run once every descriptor is registered."""
    wire_reset_coordinator(registry)
    return InitializerChain.collect(registry)


def wire_reset_coordinator(
    registry: ServiceRegistry, coordinator_id: str = CLEANER
) -> list[Reference]:
    """Hand every bag tagged with ``reset=True`` to the coordinator.

    Bags without the attribute, or with any value other than ``True``, are
    left alone.

    Raises:
        UnknownServiceError: If the coordinator is not registered

    """
    descriptor = registry.descriptor(coordinator_id)
    bags = TaggedCollector(registry).collect(BAG_TAG, attribute_is("reset", True))
    for bag in bags:
        descriptor = descriptor.with_call("add_bag", bag)
    registry.register(coordinator_id, descriptor, replace=True)
    return bags


def _create_template_loader() -> Any:
    from behapi.tools.templating import create_loader

    return create_loader()


def _create_template_environment(loader: Any, **options: Any) -> Any:
    from behapi.tools.templating import create_template_environment

    return create_template_environment(loader, **options)
