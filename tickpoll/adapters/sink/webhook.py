"""Webhook sink adapter.

Implements SinkPort by POSTing each payload as JSON to an HTTP endpoint.
Values JSON cannot represent natively are sent as their string form, the
same way the stdout and jsonl sinks write them.
"""

import json
import logging
from typing import Any

import httpx

from tickpoll.core.context import PollContext
from tickpoll.core.errors import SinkError
from tickpoll.core.ports import SinkPort

logger = logging.getLogger(__name__)


class WebhookSink(SinkPort[Any]):
    """Forwards retrieved payloads to a webhook."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize webhook sink.

        Args:
            url: Endpoint receiving the POST requests.
            api_key: Optional bearer token for authentication.
            timeout: Request timeout in seconds.
            client: Pre-configured client; mainly for tests.
        """
        self.url = url
        self.api_key = api_key
        self._client = client
        self._timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def push(self, ctx: PollContext, value: Any) -> None:
        """POST one payload.

        Raises:
            SinkError: If the payload cannot be encoded, on transport errors,
                or on a non-2xx response.
            ContextCancelled: If ``ctx`` is cancelled while the request is in flight.
        """
        try:
            body = json.dumps(value, default=str)
        except (TypeError, ValueError) as e:
            raise SinkError(f"cannot encode payload for {self.url}: {e}") from e

        client = await self._get_client()

        try:
            response = await ctx.run(
                client.post(self.url, content=body, headers=self._get_headers())
            )
        except httpx.RequestError as e:
            raise SinkError(f"failed to deliver payload to {self.url}: {e}") from e

        if not response.is_success:
            logger.debug(
                f"Webhook rejected payload: {response.status_code}",
                extra={"url": self.url, "response": response.text},
            )
            raise SinkError(f"webhook {self.url} returned HTTP {response.status_code}")
