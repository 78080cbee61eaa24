"""Service protocols consumed by the composition pass and the runner hooks."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContextInitializer(Protocol):
    """Protocol for services preparing a scenario context before its steps run.

    Implementations attach whatever they own onto the context. There is no
    return value; unexpected errors propagate to the runner and fail the
    scenario.

    Example:
        ```python
        class KeyValueInitializer:
            def __init__(self, client):
                self._client = client

            def initialize_context(self, context):
                context.kv = self._client
        ```

    """

    def initialize_context(self, context: Any) -> None:
        """Attach collaborators onto the scenario context."""
        ...


@runtime_checkable
class Resettable(Protocol):
    """Protocol for stateful services cleared between scenarios (bags)."""

    def reset(self) -> None:
        """Return the service to its initial state."""
        ...


class TagPredicate(Protocol):
    """Filter applied to the attributes of a tag."""

    def __call__(self, attributes: Any) -> bool: ...
