"""Tests for the debug reporter."""

import httpx
from rich.console import Console

from behapi.tools.debug import DebugReporter
from behapi.tools.history import History


def _exchange(status: int = 200, **kwargs) -> httpx.Response:
    request = httpx.Request("POST", "http://api.test/login")
    return httpx.Response(status, request=request, **kwargs)


def _reporter(formatter: str) -> tuple[DebugReporter, Console]:
    console = Console(record=True, width=120)
    return DebugReporter(formatter, console=console), console


class TestDebugReporter:
    """Test suite for DebugReporter."""

    def test_disabled_by_default_prints_nothing(self) -> None:
        reporter, console = _reporter("pretty")

        reporter.report(_exchange(json={"token": "abc"}))

        assert reporter.enabled is False
        assert console.export_text() == ""

    def test_pretty_formatter_prints_request_and_body(self) -> None:
        # Arrange
        reporter, console = _reporter("pretty")
        reporter.enable()

        # Act
        reporter.report(_exchange(json={"token": "abc"}))

        # Assert
        output = console.export_text()
        assert "POST http://api.test/login" in output
        assert '"token": "abc"' in output

    def test_raw_formatter_prints_status_line(self) -> None:
        reporter, console = _reporter("raw")
        reporter.enable()

        reporter.report(_exchange(404, text="nope"))

        output = console.export_text()
        assert "HTTP 404 Not Found" in output
        assert "nope" in output

    def test_unknown_formatter_falls_back_to_raw(self) -> None:
        reporter, _ = _reporter("fancy")

        assert reporter.formatter == "raw"

    def test_report_last_uses_history(self) -> None:
        # Arrange
        reporter, console = _reporter("raw")
        reporter.enable()
        history = History()

        # Act - empty history is a no-op
        reporter.report_last(history)
        response = _exchange(text="hello")
        history.add(response.request, response)
        reporter.report_last(history)

        # Assert
        assert "hello" in console.export_text()

    def test_disable_turns_reporting_off(self) -> None:
        reporter, console = _reporter("raw")
        reporter.enable()
        reporter.disable()

        reporter.report(_exchange(text="hidden"))

        assert console.export_text() == ""
