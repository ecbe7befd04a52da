"""Thin async client for the engine's HTTP API."""

from typing import Any, Protocol

import httpx

from ..config import Settings
from ..errors import NotFoundError, UpstreamError
from ..logging_config import get_logger

logger = get_logger(__name__)


class ITemporalClient(Protocol):
    """Authenticated JSON access to the engine API."""

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        """GET `path` and return the decoded JSON object."""
        ...

    async def aclose(self) -> None:
        """Release the underlying connection pool."""
        ...


class TemporalClient:
    """httpx-backed client with bearer auth and status-to-error mapping."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            headers={"Authorization": f"Bearer {settings.api_key}"},
            timeout=settings.http_timeout,
            transport=transport,
        )

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error("Upstream request failed: %s %s", path, e)
            raise UpstreamError(f"Upstream request failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Not found upstream: {path}")

        if not response.is_success:
            logger.error(
                "Upstream returned %s for %s",
                response.status_code,
                path,
                extra={"context": {"status": response.status_code, "path": path}},
            )
            raise UpstreamError(
                f"Failed to fetch {path}. Status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Upstream returned invalid JSON for {path}",
                status_code=response.status_code,
            ) from e

        if not isinstance(data, dict):
            raise UpstreamError(
                f"Upstream returned unexpected payload for {path}",
                status_code=response.status_code,
            )
        return data

    async def aclose(self) -> None:
        await self._client.aclose()
