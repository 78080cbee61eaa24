"""behapi: service composition for behave API test suites."""

from behapi.capabilities import ConditionalWiringPolicy, EnvironmentFacts, WiringDecisions
from behapi.cleaner import Cleaner
from behapi.collection import InitializerChain, TaggedCollector, always, attribute_is
from behapi.composition import Composition, compose
from behapi.configuration import AppCredentials, CompositionConfig
from behapi.errors import (
    BehapiError,
    CompositionError,
    ConfigurationError,
    CyclicDependencyError,
    DuplicateServiceError,
    RegistryFrozenError,
    ResetFailure,
    ServiceCreationError,
    UnknownServiceError,
)
from behapi.services import Reference, ServiceDescriptor, ServiceRegistry, Tag

__all__ = [
    "AppCredentials",
    "BehapiError",
    "Cleaner",
    "Composition",
    "CompositionConfig",
    "CompositionError",
    "ConditionalWiringPolicy",
    "ConfigurationError",
    "CyclicDependencyError",
    "DuplicateServiceError",
    "EnvironmentFacts",
    "InitializerChain",
    "Reference",
    "RegistryFrozenError",
    "ResetFailure",
    "ServiceCreationError",
    "ServiceDescriptor",
    "ServiceRegistry",
    "Tag",
    "TaggedCollector",
    "UnknownServiceError",
    "WiringDecisions",
    "always",
    "attribute_is",
    "compose",
]
