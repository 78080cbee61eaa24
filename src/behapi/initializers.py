"""Context initializers attaching behapi services onto scenario contexts."""

from __future__ import annotations

from typing import Any, NamedTuple

import httpx
import redis

from behapi.tools.debug import DebugReporter
from behapi.tools.history import History


class Credentials(NamedTuple):
    id: str
    secret: str


class ApiInitializer:
    """Gives steps the HTTP client, its history and the debug reporter.

    Also exposes the runner environment (``dev`` or ``test``) so steps can
    branch on it.
    """

    def __init__(
        self,
        client: httpx.Client,
        history: History,
        debug: DebugReporter,
        environment: str,
    ) -> None:
        self._client = client
        self._history = history
        self._debug = debug
        self._environment = environment

    def initialize_context(self, context: Any) -> None:
        context.http = self._client
        context.history = self._history
        context.debug = self._debug
        context.environment = self._environment


class KeyValueInitializer:
    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    def initialize_context(self, context: Any) -> None:
        context.kv = self._client


class AuthenticationInitializer:
    """Exposes the application credentials used to authenticate requests."""

    def __init__(self, app_id: str, app_secret: str) -> None:
        self._credentials = Credentials(app_id, app_secret)

    def initialize_context(self, context: Any) -> None:
        context.credentials = self._credentials


class TemplatingInitializer:
    def __init__(self, environment: Any) -> None:
        self._environment = environment

    def initialize_context(self, context: Any) -> None:
        context.templates = self._environment
