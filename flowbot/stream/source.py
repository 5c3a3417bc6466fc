"""HTTP long-poll stream source."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from urllib.parse import urlencode

import httpx
from loguru import logger

from flowbot.errors import StreamTransportError
from flowbot.rest.auth import basic_auth_header

DEFAULT_STREAM_URL = "https://stream.flowdock.com/flows"


def stream_url(flows: Iterable[str], base_url: str = DEFAULT_STREAM_URL, active: bool = False) -> str:
    """Build the stream URL for ``org/flow`` filters."""
    params = {"filter": ",".join(flows)}
    if active:
        params["active"] = "true"
    return f"{base_url}?{urlencode(params, safe='/,')}"


class HttpStreamSource:
    """Async iterator over the newline-framed lines of a streaming GET."""

    def __init__(
        self,
        url: str,
        token: str,
        connect_timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.token = token
        self.connect_timeout_seconds = connect_timeout_seconds
        self._transport = transport

    def __aiter__(self) -> AsyncIterator[str]:
        return self.lines()

    async def lines(self) -> AsyncIterator[str]:
        headers = {
            "Authorization": basic_auth_header(self.token),
            "Accept": "application/json",
        }
        # Long poll: the read side stays open until the server sends data.
        timeout = httpx.Timeout(self.connect_timeout_seconds, read=None)
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
                async with client.stream("GET", self.url, headers=headers) as response:
                    if response.status_code >= 400:
                        raise StreamTransportError(f"stream HTTP {response.status_code} for {self.url}")
                    logger.info(f"Connected to stream {self.url}")
                    async for line in response.aiter_lines():
                        yield line
        except httpx.HTTPError as e:
            raise StreamTransportError(f"stream read failed: {e}") from e
