"""HTTP JSON source adapter.

Implements SourcePort by issuing a GET request against a JSON endpoint and
returning the decoded body unchanged.
"""

import logging
from typing import Any

import httpx

from tickpoll.core.context import PollContext
from tickpoll.core.errors import SourceError
from tickpoll.core.ports import SourcePort

logger = logging.getLogger(__name__)


class HttpJsonSource(SourcePort[Any]):
    """Retrieves a JSON document over HTTP on every poll cycle."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize HTTP source.

        Args:
            url: Endpoint to GET on each cycle.
            api_key: Optional bearer token for authentication.
            timeout: Request timeout in seconds.
            client: Pre-configured client; mainly for tests.
        """
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout)

    def _get_headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def __aenter__(self) -> "HttpJsonSource":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the httpx client and clean up resources."""
        await self.client.aclose()

    async def fetch(self, ctx: PollContext) -> Any:
        """GET the endpoint and return its decoded JSON body.

        The request is abandoned if ``ctx`` is cancelled while it is in
        flight.

        Raises:
            SourceError: On transport errors, non-2xx responses or an
                undecodable body.
            ContextCancelled: If ``ctx`` is cancelled first.
        """
        try:
            response = await ctx.run(
                self.client.get(self.url, headers=self._get_headers())
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.debug(f"Source returned {e.response.status_code} for {self.url}")
            raise SourceError(
                f"source {self.url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise SourceError(f"failed to fetch {self.url}: {e}") from e
        except ValueError as e:
            raise SourceError(f"source {self.url} returned invalid JSON: {e}") from e
