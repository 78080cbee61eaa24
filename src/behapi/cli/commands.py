"""CLI command implementations for configuration validation and inspection."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from behapi.capabilities import EnvironmentFacts
from behapi.cli.errors import cli_error_handler
from behapi.composition import Composition, compose
from behapi.configuration import CompositionConfig
from behapi.logging import setup_logging

logger = logging.getLogger(__name__)
console = Console()


def validate_config_command(config_path: Path, log_level: str = "INFO") -> None:
    """Validate a configuration file and print the normalised values.

    Args:
        config_path: Path to the YAML configuration file
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("validate", "Configuration validation failed"):
        config = CompositionConfig.from_file(config_path)

        table = Table(title="Configuration", show_header=True, header_style="bold")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("base_url", config.base_url)
        table.add_row("environment", config.environment)
        table.add_row("debug_formatter", config.debug_formatter)
        table.add_row("app.id", config.app.id)
        table.add_row("app.secret", "*" * len(config.app.secret))
        console.print(table)
        console.print(f"[green]Configuration is valid: {config_path}[/green]")


def list_services_command(
    config_path: Path, without_templating: bool = False, log_level: str = "INFO"
) -> None:
    """Compose the registry, without instantiating anything, and print it.

    Args:
        config_path: Path to the YAML configuration file
        without_templating: Compose as if jinja2 were not installed
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("services", "Composition failed"):
        config = CompositionConfig.from_file(config_path)
        facts = EnvironmentFacts() if without_templating else EnvironmentFacts.detect()
        composition = compose(config, facts=facts)
        _print_composition(composition)


def _print_composition(composition: Composition) -> None:
    registry = composition.registry

    services = Table(title="Services", show_header=True, header_style="bold")
    services.add_column("Id", style="cyan")
    services.add_column("Recipe")
    services.add_column("Tags", style="magenta")
    for service_id in registry.ids():
        descriptor = registry.descriptor(service_id)
        tags = ", ".join(
            tag.name
            + (
                "(" + ", ".join(f"{k}={v!r}" for k, v in tag.attributes.items()) + ")"
                if tag.attributes
                else ""
            )
            for tag in descriptor.tags
        )
        services.add_row(service_id, descriptor.recipe, tags or "-")
    console.print(services)

    chain = Table(title="Context initializers", show_header=True, header_style="bold")
    chain.add_column("#", justify="right")
    chain.add_column("Id", style="cyan")
    for position, service_id in enumerate(composition.initializers.ids, start=1):
        chain.add_row(str(position), service_id)
    console.print(chain)

    if not composition.decisions.templating:
        console.print("[yellow]Templating disabled: jinja2 is not available[/yellow]")
