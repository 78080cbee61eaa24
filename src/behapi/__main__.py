"""Command-line entry point for behapi.

Commands:
- validate: check a configuration file
- services: show the composed registry and the context initializer chain
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from behapi.cli import list_services_command, validate_config_command

app = typer.Typer(name="behapi", no_args_is_help=True)

ConfigArgument = Annotated[
    Path,
    typer.Argument(
        help="Path to the behapi configuration YAML file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
]

LogLevelOption = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        case_sensitive=False,
    ),
]


@app.command()
def validate(config: ConfigArgument, log_level: LogLevelOption = "WARNING") -> None:
    """Validate a configuration file."""
    validate_config_command(config, log_level)


@app.command()
def services(
    config: ConfigArgument,
    without_templating: Annotated[
        bool,
        typer.Option(
            "--without-templating",
            help="Compose as if the optional templating library were missing",
        ),
    ] = False,
    log_level: LogLevelOption = "WARNING",
) -> None:
    """List registered services, their tags and the initializer chain."""
    list_services_command(config, without_templating, log_level)


if __name__ == "__main__":
    app()
