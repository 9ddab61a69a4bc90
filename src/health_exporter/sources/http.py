"""
HTTP Source — Reads records from a remote health data API.

Endpoints (relative to ``base_url``):
    POST /authorization        {"read": [...]}
    POST /units                {"types": [...]}  -> {"units": {...}}
    GET  /records/<category>   ?unit=&cursor=     -> {"records": [...], "next": cursor | null}

Transient failures (timeouts, connection errors, 429 and 5xx responses)
are retried with exponential backoff before a SourceError is raised.
"""

from __future__ import annotations

import logging
import os
from typing import AsyncIterator, Iterable

import httpx

from health_exporter.core.errors import SourceError
from health_exporter.core.resilience import (
    RETRYABLE_STATUS_CODES,
    ExponentialBackoff,
    parse_retry_after,
)
from health_exporter.models.record import Record

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "HEALTH_EXPORT_TOKEN"


class HttpSource:
    """
    Record source backed by a REST API.

    Pass an ``httpx.AsyncClient`` to share a connection pool or to inject a
    transport; otherwise the source creates its own client and closes it in
    ``aclose``.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        backoff: ExponentialBackoff | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token or os.environ.get(TOKEN_ENV_VAR)
        self.backoff = backoff or ExponentialBackoff(base_delay=1.0, max_delay=60.0, max_retries=3)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(30.0, connect=60.0), follow_redirects=True
        )
        if not self.token:
            logger.warning(f"No {TOKEN_ENV_VAR}. Requests are sent unauthenticated.")

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def authorize(self, types: Iterable[str]) -> None:
        await self._request("POST", "/authorization", json={"read": sorted(types)})

    async def preferred_units(self, quantity_types: Iterable[str]) -> dict[str, str]:
        payload = await self._request("POST", "/units", json={"types": sorted(quantity_types)})
        units = payload.get("units")
        if not isinstance(units, dict):
            raise SourceError("unit discovery response has no 'units' object")
        return units

    async def read(self, category: str, unit: str | None = None) -> AsyncIterator[Record]:
        cursor = None
        while True:
            params = {}
            if unit is not None:
                params["unit"] = unit
            if cursor is not None:
                params["cursor"] = cursor

            payload = await self._request("GET", f"/records/{category}", params=params)
            for entry in payload.get("records", []):
                yield Record.from_dict(entry, category=category)

            cursor = payload.get("next")
            if not cursor:
                return

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        """Send a request, retrying transient failures, and decode the JSON body."""
        url = f"{self.base_url}{path}"
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}

        attempt = 0
        while True:
            retry_after = None
            try:
                response = await self.client.request(method, url, headers=headers, **kwargs)
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    response.raise_for_status()
                    return response.json() if response.content else {}
                retry_after = parse_retry_after(response.headers.get("Retry-After"))
                failure = f"HTTP {response.status_code}"
            except (httpx.TimeoutException, httpx.ConnectError) as e:
                failure = f"{type(e).__name__}: {e}"
            except httpx.HTTPStatusError as e:
                raise SourceError(f"{method} {url} failed with HTTP {e.response.status_code}") from e
            except ValueError as e:
                raise SourceError(f"{method} {url} returned invalid JSON") from e

            if not self.backoff.should_retry(attempt):
                raise SourceError(f"{method} {url} failed after {attempt + 1} attempts ({failure})")

            logger.debug(f"{method} {url} failed ({failure})")
            await self.backoff.wait(attempt, retry_after)
            attempt += 1
