"""CLI error handling for behapi."""

from __future__ import annotations

import logging
from collections.abc import Generator, Sequence
from contextlib import contextmanager
from typing_extensions import override

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from behapi.errors import ConfigurationError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


class CLIError(Exception):
    """A failed command, ready to be shown to the user."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        details: Sequence[str] = (),
    ) -> None:
        """Initialise CLI error with context.

        Args:
            message: Human-readable error message describing what went wrong
            command: Name of the CLI command that failed (e.g., "validate")
            details: One line per underlying problem, e.g. per invalid field

        """
        super().__init__(message)
        self.command = command
        self.details = list(details)

    @override
    def __str__(self) -> str:
        base_message = super().__str__()
        if self.command:
            return f"CLI command '{self.command}' failed: {base_message}"
        return base_message

    @classmethod
    def from_error(cls, error: Exception, command: str) -> CLIError:
        """Translate an error raised by a command body."""
        if isinstance(error, ConfigurationError):
            return cls("Invalid configuration", command, error.details or error.fields)
        return cls(str(error), command)

    def render(self) -> Text:
        # Plain Text so brackets in messages are never read as markup
        text = Text(str(self), style="red")
        for detail in self.details:
            text.append(f"\n  - {detail}")
        return text


@contextmanager
def cli_error_handler(command: str, title: str) -> Generator[None]:
    """Context manager for unified CLI error handling.

    Catches exceptions, displays them as Rich error panels, and exits
    with code 1. Configuration errors list every invalid field on its
    own line.

    Args:
        command: CLI command name for error context.
        title: Panel title for the error display.

    """
    try:
        yield
    except Exception as e:
        cli_error = CLIError.from_error(e, command)
        logger.error("%s: %s", title, cli_error)
        console.print(Panel(cli_error.render(), title=title, border_style="red"))
        raise typer.Exit(1) from e
