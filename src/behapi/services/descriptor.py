"""Service descriptors for the behapi registry.

A descriptor is an immutable construction recipe. Construction is either direct
(call ``factory`` with the resolved arguments) or delegated (resolve another
service, then call one of its methods with the resolved arguments). Both shapes
go through the same resolution path in the registry.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Self

Lifetime = Literal["singleton", "transient"]


@dataclass(frozen=True)
class Reference:
    """Pointer to another registered service, resolved at instantiation time."""

    id: str

    def __str__(self) -> str:
        return f"@{self.id}"


@dataclass(frozen=True)
class Tag:
    """Capability annotation carried by a descriptor.

    Attributes:
        name: Tag name shared by every service with this capability
        attributes: Free-form attributes collectors can filter on

    """

    name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MethodCall:
    """Method invoked on the instance right after construction."""

    method: str
    arguments: tuple[Any, ...] = ()


@dataclass(frozen=True)
class FactoryMethod:
    """Delegated construction: call ``method`` on ``service`` to build the instance.

    Attributes:
        service: Reference to a registered service, or an inline descriptor that
            is built for this purpose only
        method: Name of the method to invoke on the factory instance

    """

    service: Reference | ServiceDescriptor
    method: str


@dataclass(frozen=True)
class ServiceDescriptor:
    """Descriptor for a service registration.

    Attributes:
        factory: Callable building the instance (usually a class)
        factory_method: Delegated construction, mutually exclusive with factory
        arguments: Positional arguments, literals or References
        keyword_arguments: Keyword arguments, literals or References
        calls: Methods invoked on the fresh instance, in order
        tags: Capability tags
        lifetime: Service lifetime ("singleton" or "transient")

    """

    factory: Callable[..., Any] | None = None
    factory_method: FactoryMethod | None = None
    arguments: tuple[Any, ...] = ()
    keyword_arguments: Mapping[str, Any] = field(default_factory=dict)
    calls: tuple[MethodCall, ...] = ()
    tags: tuple[Tag, ...] = ()
    lifetime: Lifetime = "singleton"

    def __post_init__(self) -> None:
        if (self.factory is None) == (self.factory_method is None):
            msg = "ServiceDescriptor needs exactly one of factory or factory_method"
            raise ValueError(msg)
        if self.lifetime not in ("singleton", "transient"):
            msg = f"Unknown lifetime: {self.lifetime}"
            raise ValueError(msg)

    @classmethod
    def from_factory_method(
        cls,
        service: Reference | ServiceDescriptor,
        method: str,
        *arguments: Any,
        **keyword_arguments: Any,
    ) -> Self:
        """Build a descriptor constructed through a method of another service."""
        return cls(
            factory_method=FactoryMethod(service, method),
            arguments=arguments,
            keyword_arguments=keyword_arguments,
        )

    @property
    def is_shared(self) -> bool:
        return self.lifetime == "singleton"

    @property
    def recipe(self) -> str:
        """Short human-readable description of how the service is built."""
        if self.factory_method is not None:
            owner = self.factory_method.service
            if isinstance(owner, ServiceDescriptor):
                owner_name = owner.recipe
            else:
                owner_name = str(owner)
            return f"{owner_name}.{self.factory_method.method}()"
        factory = self.factory
        return getattr(factory, "__qualname__", None) or repr(factory)

    def with_argument(self, value: Any) -> Self:
        return replace(self, arguments=(*self.arguments, value))

    def with_call(self, method: str, *arguments: Any) -> Self:
        return replace(self, calls=(*self.calls, MethodCall(method, arguments)))

    def with_tag(self, name: str, **attributes: Any) -> Self:
        return replace(self, tags=(*self.tags, Tag(name, attributes)))

    def tagged(self, name: str) -> list[Tag]:
        """Return every tag with the given name, in declaration order."""
        return [tag for tag in self.tags if tag.name == name]

    def references(self) -> list[Reference]:
        """List every Reference the recipe depends on, including inline factories."""
        found: list[Reference] = []
        if self.factory_method is not None:
            owner = self.factory_method.service
            if isinstance(owner, Reference):
                found.append(owner)
            else:
                found.extend(owner.references())
        _collect_references(self.arguments, found)
        _collect_references(self.keyword_arguments, found)
        for call in self.calls:
            _collect_references(call.arguments, found)
        return found


def _collect_references(value: Any, found: list[Reference]) -> None:
    if isinstance(value, Reference):
        found.append(value)
    elif isinstance(value, Mapping):
        for item in value.values():
            _collect_references(item, found)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect_references(item, found)
