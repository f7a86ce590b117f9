"""HTTP client for the printer aggregator API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp

from ..config import AggregatorConfig

LOGGER = logging.getLogger(__name__)


class AggregatorError(RuntimeError):
    """Raised when the aggregator answers with an unexpected payload."""


class AggregatorClient:
    """Non-blocking client for ``GET /printers`` on the aggregator.

    The API base is injected through :class:`AggregatorConfig` at startup.
    A session may be shared with the caller; otherwise the client creates
    one lazily and closes it in :meth:`aclose`.
    """

    def __init__(
        self,
        config: AggregatorConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config
        self._base_url = self.config.base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def resolve_url(self, path: str) -> str:
        """Join a relative engine path (e.g. a thumbnail path) onto the API base."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._base_url}{path}"

    async def fetch_printers(self, timeout: Optional[float] = None) -> List[Any]:
        """Fetch the raw fleet snapshot.

        Args:
            timeout: Request timeout in seconds (defaults to the configured value)

        Raises:
            asyncio.TimeoutError: If request exceeds timeout
            aiohttp.ClientError: If HTTP request fails
            AggregatorError: If the response body is not a JSON array
        """
        session = await self._ensure_session()
        url = self.resolve_url("/printers")
        limit = timeout if timeout is not None else self.config.timeout_seconds

        try:
            async with asyncio.timeout(limit):
                async with session.get(url) as response:
                    response.raise_for_status()
                    payload = await response.json()
        except asyncio.TimeoutError:
            LOGGER.warning("Aggregator query timed out after %.1fs (url=%s)", limit, url)
            raise

        if not isinstance(payload, list):
            raise AggregatorError(
                f"expected a JSON array from {url}, got {type(payload).__name__}"
            )

        return payload

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session
