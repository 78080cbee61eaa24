"""Bounded history of HTTP exchanges."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import NamedTuple

import httpx


class Exchange(NamedTuple):
    request: httpx.Request
    response: httpx.Response


class History:
    """Keeps the last ``limit`` request/response pairs sent by the HTTP client.

    Registered as a resettable bag so it is emptied between scenarios.
    """

    def __init__(self, limit: int = 1) -> None:
        if limit < 1:
            msg = f"History limit must be at least 1, got {limit}"
            raise ValueError(msg)
        self._entries: deque[Exchange] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        return self._entries.maxlen or 0

    def add(self, request: httpx.Request, response: httpx.Response) -> None:
        self._entries.append(Exchange(request, response))

    def on_response(self, response: httpx.Response) -> None:
        """Response event hook for httpx clients."""
        self.add(response.request, response)

    @property
    def last(self) -> Exchange | None:
        return self._entries[-1] if self._entries else None

    @property
    def last_request(self) -> httpx.Request | None:
        last = self.last
        return last.request if last else None

    @property
    def last_response(self) -> httpx.Response | None:
        last = self.last
        return last.response if last else None

    def reset(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Exchange]:
        return iter(self._entries)
