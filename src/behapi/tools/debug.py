"""Debug reporter printing HTTP exchanges while writing scenarios."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

import httpx
from rich.console import Console, Group
from rich.json import JSON
from rich.panel import Panel
from rich.text import Text

from behapi.tools.history import History

logger = logging.getLogger(__name__)

FORMATTERS = ("pretty", "raw")


class DebugReporter:
    """Prints the last HTTP exchange when debugging is enabled.

    Disabled by default; the runner integration turns it on when asked to.
    """

    def __init__(self, formatter: str = "pretty", console: Console | None = None) -> None:
        if formatter not in FORMATTERS:
            logger.warning(
                "Unknown debug formatter '%s', falling back to 'raw'", formatter
            )
            formatter = "raw"
        self.formatter = formatter
        self.enabled = False
        self._console = console or Console(stderr=True)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, response: httpx.Response) -> None:
        """Print one exchange; does nothing while disabled."""
        if not self.enabled:
            return
        render: Callable[[httpx.Response], None] = getattr(self, f"_{self.formatter}")
        render(response)

    def report_last(self, history: History) -> None:
        response = history.last_response
        if response is None:
            logger.debug("No HTTP exchange recorded yet, nothing to report")
            return
        self.report(response)

    def _raw(self, response: httpx.Response) -> None:
        request = response.request
        lines = [f"{request.method} {request.url}"]
        lines += [f"{name}: {value}" for name, value in request.headers.items()]
        lines += ["", f"HTTP {response.status_code} {response.reason_phrase}"]
        lines += [f"{name}: {value}" for name, value in response.headers.items()]
        lines += ["", response.text]
        self._console.print(Text("\n".join(lines)))

    def _pretty(self, response: httpx.Response) -> None:
        request = response.request
        style = "green" if response.is_success else "red"
        headers = Text(
            "\n".join(f"{name}: {value}" for name, value in response.headers.items()),
            style="dim",
        )
        self._console.print(
            Panel(
                Group(headers, _body(response)),
                title=f"{request.method} {request.url}",
                subtitle=f"{response.status_code} {response.reason_phrase}",
                border_style=style,
            )
        )


def _body(response: httpx.Response) -> JSON | Text:
    try:
        return JSON.from_data(response.json())
    except (json.JSONDecodeError, UnicodeDecodeError):
        return Text(response.text)
