"""Factory building the HTTP client used by scenario steps."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from behapi.tools.history import History

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """Builds httpx clients wired to the registered history subscribers.

    The client never follows redirects and never raises on error status
    codes, so steps can assert on any response.
    """

    DEFAULTS: dict[str, Any] = {"follow_redirects": False}

    def __init__(self) -> None:
        self._subscribers: list[History] = []

    def add_subscriber(self, subscriber: History) -> None:
        self._subscribers.append(subscriber)

    def get_client(self, base_url: str, **options: Any) -> httpx.Client:
        """Create a client for ``base_url``.

        Args:
            base_url: Base URL every relative request is sent to
            **options: Extra httpx.Client options, overriding the defaults

        Returns:
            Configured httpx client

        """
        settings = {**self.DEFAULTS, **options}
        hooks = settings.pop("event_hooks", {})
        response_hooks = [
            *hooks.get("response", []),
            *(subscriber.on_response for subscriber in self._subscribers),
        ]
        logger.debug(
            "Creating HTTP client for %s with %d subscriber(s)",
            base_url,
            len(self._subscribers),
        )
        return httpx.Client(
            base_url=base_url,
            event_hooks={**hooks, "response": response_hooks},
            **settings,
        )
