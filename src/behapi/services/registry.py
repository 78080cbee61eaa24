"""Service registry for the behapi composition root."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from typing import Any, NamedTuple

from behapi.errors import (
    BehapiError,
    CyclicDependencyError,
    DuplicateServiceError,
    RegistryFrozenError,
    ServiceCreationError,
    UnknownServiceError,
)
from behapi.services.descriptor import Reference, ServiceDescriptor
from behapi.services.protocols import TagPredicate

logger = logging.getLogger(__name__)


class TaggedService(NamedTuple):
    """A registry entry matched by a tag lookup."""

    id: str
    descriptor: ServiceDescriptor
    attributes: Mapping[str, Any]


class ServiceRegistry:
    """Identifier-keyed registry with lazy, cached service construction.

    Descriptors are stored at registration; instances are built on first
    ``get()`` and cached for singleton services. Each registry is an isolated
    object owned by whoever composed it.
    """

    def __init__(self) -> None:
        """Initialise an empty registry."""
        # dict preserves insertion order, which tag lookups rely on
        self._descriptors: dict[str, ServiceDescriptor] = {}
        self._instances: dict[str, Any] = {}
        self._resolving: list[str] = []
        self._lock = threading.RLock()
        self._frozen = False
        logger.debug("ServiceRegistry initialized")

    def register(
        self, service_id: str, descriptor: ServiceDescriptor, *, replace: bool = False
    ) -> None:
        """Register a service descriptor.

        Args:
            service_id: Unique identifier of the service
            descriptor: Construction recipe, tags and lifetime
            replace: Allow overwriting an existing, not yet instantiated, entry

        Raises:
            DuplicateServiceError: If the id exists and replace is False, or the
                existing singleton was already instantiated
            RegistryFrozenError: If the registry was frozen

        """
        with self._lock:
            if self._frozen:
                msg = f"Cannot register '{service_id}': registry is frozen"
                raise RegistryFrozenError(msg)
            if service_id in self._descriptors:
                if not replace:
                    raise DuplicateServiceError(service_id)
                if service_id in self._instances:
                    raise DuplicateServiceError(
                        service_id, "was already instantiated and cannot be replaced"
                    )
            self._descriptors[service_id] = descriptor
        logger.debug(
            "Registered service: %s (%s) with lifetime: %s",
            service_id,
            descriptor.recipe,
            descriptor.lifetime,
        )

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def has(self, service_id: str) -> bool:
        return service_id in self._descriptors

    __contains__ = has

    def __len__(self) -> int:
        return len(self._descriptors)

    def ids(self) -> list[str]:
        """Return registered identifiers in registration order."""
        return list(self._descriptors)

    def descriptor(self, service_id: str) -> ServiceDescriptor:
        """Get the descriptor registered for an identifier.

        Raises:
            UnknownServiceError: If the identifier was never registered

        """
        try:
            return self._descriptors[service_id]
        except KeyError:
            raise UnknownServiceError(service_id) from None

    def get(self, service_id: str) -> Any:
        """Get a service instance, building it on first access.

        Args:
            service_id: Identifier of the service to retrieve

        Returns:
            Service instance (the cached one for singletons)

        Raises:
            UnknownServiceError: If the identifier was never registered
            CyclicDependencyError: If resolution re-enters this identifier
            ServiceCreationError: If the factory fails or returns None

        """
        with self._lock:
            if service_id in self._instances:
                logger.debug("Returning cached singleton service: %s", service_id)
                return self._instances[service_id]

            descriptor = self.descriptor(service_id)

            if service_id in self._resolving:
                start = self._resolving.index(service_id)
                raise CyclicDependencyError([*self._resolving[start:], service_id])

            self._resolving.append(service_id)
            try:
                logger.debug("Creating %s service: %s", descriptor.lifetime, service_id)
                instance = self._build(service_id, descriptor)
            finally:
                self._resolving.pop()

            if descriptor.is_shared:
                self._instances[service_id] = instance
                logger.debug("Singleton service created and cached: %s", service_id)
            return instance

    def find_tagged(
        self, tag_name: str, predicate: TagPredicate | None = None
    ) -> list[TaggedService]:
        """Find every service carrying a tag, in registration order.

        A service carrying the same tag several times yields one entry per
        matching tag.

        Args:
            tag_name: Name of the tag to look for
            predicate: Optional filter on the tag attributes

        Returns:
            Matching (id, descriptor, attributes) entries

        """
        found: list[TaggedService] = []
        for service_id, descriptor in self._descriptors.items():
            for tag in descriptor.tagged(tag_name):
                if predicate is None or predicate(tag.attributes):
                    found.append(TaggedService(service_id, descriptor, tag.attributes))
        return found

    def instantiated(self, service_id: str) -> bool:
        """Check whether a singleton was already built."""
        return service_id in self._instances

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())

    def _build(self, service_id: str, descriptor: ServiceDescriptor) -> Any:
        try:
            if descriptor.factory_method is not None:
                owner_ref = descriptor.factory_method.service
                if isinstance(owner_ref, Reference):
                    owner = self.get(owner_ref.id)
                else:
                    owner = self._build(f"{service_id}<factory>", owner_ref)
                factory = getattr(owner, descriptor.factory_method.method)
            else:
                factory = descriptor.factory

            args = self._resolve(descriptor.arguments)
            kwargs = self._resolve(dict(descriptor.keyword_arguments))
            instance = factory(*args, **kwargs)  # type: ignore[misc]

            if instance is None:
                logger.error(
                    "Factory for %s returned None - service unavailable", service_id
                )
                raise ServiceCreationError(service_id, "factory returned None")

            for call in descriptor.calls:
                getattr(instance, call.method)(*self._resolve(call.arguments))
        except BehapiError:
            raise
        except Exception as e:
            logger.error("Failed to create service %s: %s", service_id, e)
            raise ServiceCreationError(service_id, str(e)) from e
        return instance

    def _resolve(self, value: Any) -> Any:
        if isinstance(value, Reference):
            return self.get(value.id)
        if isinstance(value, Mapping):
            return {key: self._resolve(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self._resolve(item) for item in value]
        if isinstance(value, tuple):
            return tuple(self._resolve(item) for item in value)
        return value
