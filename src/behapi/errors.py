"""Error classes for behapi.

This module provides:
- BehapiError: Base exception class for all behapi errors
- ConfigurationError: Invalid or missing configuration fields
- CompositionError: Base exception for registry and wiring errors
- UnknownServiceError, CyclicDependencyError, DuplicateServiceError,
  RegistryFrozenError, ServiceCreationError: Composition errors
- ResetFailure: A resettable bag failed to reset (reported, never raised)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from typing_extensions import override


class BehapiError(Exception):
    """Base exception for all behapi errors."""

    pass


class ConfigurationError(BehapiError):
    """Raised when the composition configuration is invalid.

    Every violated field is listed, not only the first one found.
    """

    def __init__(self, fields: Sequence[str], details: Sequence[str] = ()) -> None:
        """Initialise configuration error.

        Args:
            fields: Dotted paths of every violated field (e.g. ``app.id``)
            details: Human-readable description per violation

        """
        self.fields = list(fields)
        self.details = list(details)
        message = "Invalid configuration for field(s): " + ", ".join(self.fields)
        if self.details:
            message += "\n" + "\n".join(f"  - {detail}" for detail in self.details)
        super().__init__(message)


class CompositionError(BehapiError):
    """Base exception for errors raised while building or resolving the registry."""

    pass


class UnknownServiceError(CompositionError, KeyError):
    """Raised when looking up an identifier that was never registered."""

    def __init__(self, service_id: str) -> None:
        self.service_id = service_id
        super().__init__(f"Service '{service_id}' is not registered")

    @override
    def __str__(self) -> str:
        # KeyError would otherwise quote the whole message
        return str(self.args[0])


class CyclicDependencyError(CompositionError):
    """Raised when resolving a service re-enters its own resolution."""

    def __init__(self, path: Sequence[str]) -> None:
        self.path = list(path)
        super().__init__("Circular reference detected: " + " -> ".join(self.path))


class DuplicateServiceError(CompositionError):
    """Raised when an identifier is registered twice without ``replace=True``."""

    def __init__(self, service_id: str, reason: str = "is already registered") -> None:
        self.service_id = service_id
        super().__init__(f"Service '{service_id}' {reason}")


class RegistryFrozenError(CompositionError):
    """Raised when registering into a registry after composition finished."""

    pass


class ServiceCreationError(CompositionError):
    """Raised when a service factory fails or returns nothing."""

    def __init__(self, service_id: str, reason: str) -> None:
        self.service_id = service_id
        super().__init__(f"Failed to create service '{service_id}': {reason}")


class ResetFailure(BehapiError):
    """A bag failed to reset after a scenario.

    Collected and logged by the cleaner, never propagated to the runner.
    """

    def __init__(self, bag: Any, original_error: Exception) -> None:
        self.bag = bag
        self.original_error = original_error
        super().__init__(
            f"Failed to reset {type(bag).__name__}: {original_error}"
        )
