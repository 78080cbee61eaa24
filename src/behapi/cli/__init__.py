"""CLI command implementations for behapi."""

from behapi.cli.commands import list_services_command, validate_config_command
from behapi.cli.errors import CLIError, cli_error_handler

__all__ = [
    "CLIError",
    "cli_error_handler",
    "list_services_command",
    "validate_config_command",
]
