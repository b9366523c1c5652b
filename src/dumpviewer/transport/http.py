"""Transport for a remote dumpviewer server over HTTP."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from dumpviewer.errors import TransportError
from dumpviewer.models import Dump

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class HttpTransport:
    """Fetches, clears and posts dumps through the server's REST API.

    Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {self.base_url}{path} failed: {e}") from e
        return response

    async def fetch_dumps(self) -> list[Dump]:
        response = await self._request("GET", "/api/dumps")
        try:
            items = response.json()
            if not isinstance(items, list):
                raise TransportError(f"Expected a list of dumps, got {type(items).__name__}")
            return [Dump.model_validate(item) for item in items]
        except (ValueError, ValidationError) as e:
            raise TransportError(f"Invalid dump list from {self.base_url}: {e}") from e

    async def clear_dumps(self) -> None:
        await self._request("DELETE", "/api/dumps")

    async def send_dump(self, dump: Dump) -> None:
        """Post a dump to the collector endpoint."""
        await self._request("POST", "/api/dump", json=dump.to_wire())
        log.debug("Sent dump to %s", self.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
