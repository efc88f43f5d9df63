"""Shared plumbing for httpx-backed provider adapters.

Provider HTTP calls are pure: no retries, no fallback.  This module only
turns httpx's exception zoo into the provider error taxonomy the
orchestrator understands.
"""

from __future__ import annotations

from typing import Any

import httpx

from fitcoach.domain.exceptions import (
    InvalidShapeError,
    ProviderTimeoutError,
    ProviderTransportError,
)
from fitcoach.ports.outbound import ProviderAdapter


class HttpProviderAdapter(ProviderAdapter):
    """Base class holding the shared ``httpx.AsyncClient`` and API key."""

    provider_id = "http"

    def __init__(self, api_key: str, *, client: httpx.AsyncClient | None = None) -> None:
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    async def _post(self, url: str, *, timeout: float, **kwargs: Any) -> httpx.Response:
        return await self._send("post", url, timeout=timeout, **kwargs)

    async def _get(self, url: str, *, timeout: float, **kwargs: Any) -> httpx.Response:
        return await self._send("get", url, timeout=timeout, **kwargs)

    async def _send(self, method: str, url: str, *, timeout: float, **kwargs: Any) -> httpx.Response:
        try:
            response = await getattr(self._client, method)(url, timeout=timeout, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(self.provider_id, f"Timeout after {timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            raise ProviderTransportError(
                self.provider_id, f"HTTP {exc.response.status_code} from {exc.request.url.host}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderTransportError(self.provider_id, f"{type(exc).__name__}: {exc}") from exc
        return response

    def _json(self, response: httpx.Response) -> Any:
        """Decode a 2xx body; an unreadable body is a shape problem, not transport."""
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidShapeError(f"[{self.provider_id}] Response body is not JSON") from exc

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
