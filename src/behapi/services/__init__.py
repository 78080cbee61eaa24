"""Service registry and descriptor infrastructure."""

from behapi.services.descriptor import (
    FactoryMethod,
    MethodCall,
    Reference,
    ServiceDescriptor,
    Tag,
)
from behapi.services.protocols import ContextInitializer, Resettable, TagPredicate
from behapi.services.registry import ServiceRegistry, TaggedService

__all__ = [
    "ContextInitializer",
    "FactoryMethod",
    "MethodCall",
    "Reference",
    "Resettable",
    "ServiceDescriptor",
    "ServiceRegistry",
    "Tag",
    "TagPredicate",
    "TaggedService",
]
