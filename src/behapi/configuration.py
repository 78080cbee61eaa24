"""Composition configuration.

The configuration block is validated once, before any service is registered, and
is immutable afterwards. Keys are accepted in both snake_case (``base_url``) and
camelCase (``baseUrl``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from behapi.errors import ConfigurationError

CONFIG_KEY = "behapi"


class BaseServiceConfiguration(BaseModel):
    """Base class for behapi configuration objects.

    Features:
        - Pydantic validation for type safety
        - Immutable (frozen) once created
        - Strict validation (no extra fields allowed)
        - from_properties() factory method for dictionary-based creation

    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from properties dictionary with validation.

        Args:
            properties: Dictionary containing configuration properties

        Returns:
            Validated configuration instance

        Raises:
            ConfigurationError: Listing every invalid or missing field

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise _to_configuration_error(e) from e


def _to_configuration_error(error: ValidationError) -> ConfigurationError:
    fields: list[str] = []
    details: list[str] = []
    for item in error.errors():
        parts = [_field_name(part) for part in item["loc"]]
        if item["type"] == "extra_forbidden" and parts:
            # Unknown keys are reported as the user spelled them
            parts[-1] = str(item["loc"][-1])
        path = ".".join(parts) or "<root>"
        if path not in fields:
            fields.append(path)
        details.append(f"{path}: {item['msg']}")
    return ConfigurationError(fields, details)


def _field_name(part: str | int) -> str:
    # Report snake_case paths whatever spelling the input used
    if isinstance(part, int):
        return str(part)
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in part)


def _not_blank(value: str, label: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{label} cannot be empty")
    return value.strip()


class AppCredentials(BaseServiceConfiguration):
    """Application credentials used by the authentication initializer."""

    id: str = Field(description="Application ID to use")
    secret: str = Field(description="Application Secret to use")

    @field_validator("id", "secret")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only credentials."""
        return _not_blank(v, "Credential")


class CompositionConfig(BaseServiceConfiguration):
    """Validated configuration consumed by every wiring step.

    Attributes:
        base_url: Base URL the HTTP client sends requests to
        environment: Runner environment, ``dev`` or ``test``
        debug_formatter: Name of the formatter used by the debug reporter
        app: Application credentials

    Example:
        ```python
        config = CompositionConfig.from_properties({
            "baseUrl": "http://api.test",
            "environment": "test",
            "app": {"id": "X", "secret": "Y"},
        })
        ```

    """

    base_url: str = Field(description="Base URL of the API under test")
    environment: Literal["dev", "test"] = Field(default="dev")
    debug_formatter: str = Field(default="pretty")
    app: AppCredentials

    @model_validator(mode="before")
    @classmethod
    def default_app_block(cls, data: Any) -> Any:
        """Treat a missing ``app`` block as empty so its fields get reported."""
        if isinstance(data, dict) and data.get("app") is None:
            return {**data, "app": {}}
        return data

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate that the base URL is not empty."""
        return _not_blank(v, "Base URL")

    @property
    def debug(self) -> bool:
        """Whether services should run in debug mode."""
        return self.environment == "dev"

    @classmethod
    def from_file(cls, path: Path | str) -> Self:
        """Load configuration from a YAML file.

        The file holds either the configuration mapping itself or a mapping
        nested under a top-level ``behapi`` key.

        Raises:
            ConfigurationError: If the file cannot be read, parsed or validated

        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(["<file>"], [f"Failed to parse {path}: {e}"]) from e
        except OSError as e:
            raise ConfigurationError(["<file>"], [f"Failed to read {path}: {e}"]) from e

        if isinstance(raw, dict) and isinstance(raw.get(CONFIG_KEY), dict):
            raw = raw[CONFIG_KEY]
        if not isinstance(raw, dict):
            raise ConfigurationError(
                ["<file>"], [f"Expected a mapping in {path}, got {type(raw).__name__}"]
            )
        return cls.from_properties(raw)
