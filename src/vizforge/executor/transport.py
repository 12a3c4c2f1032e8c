"""HTTP transport for the execution service.

thin wrapper around httpx.AsyncClient. errors are not handled here -
non-2xx responses raise httpx.HTTPStatusError and network problems raise
httpx.TransportError, both straight to the caller.
"""

import logging
from typing import Any

import httpx

from vizforge.settings import ClientSettings

logger = logging.getLogger(__name__)


class Transport:
    """JSON over HTTP against a single base url."""

    def __init__(
        self,
        settings: ClientSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        # transport is injectable so tests can use httpx.MockTransport
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            verify=settings.verify,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def post_json(self, path: str, body: dict[str, Any]) -> httpx.Response:
        logger.debug("POST %s", path)
        response = await self._client.post(path, json=body)
        response.raise_for_status()
        return response

    async def get_json(self, path: str) -> Any:
        logger.debug("GET %s", path)
        response = await self._client.get(path)
        response.raise_for_status()
        return response.json()

    async def poll_resource(self, url: str) -> httpx.Response:
        """Fetch a resource the server handed us.

        a single read - waiting for the result to be ready is up to the
        server (it holds the request) and any retry policy up to the caller.
        """
        logger.debug("Polling %s", url)
        response = await self._client.get(url)
        response.raise_for_status()
        return response

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
