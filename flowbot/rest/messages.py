"""Posting messages to flows."""

from __future__ import annotations

import httpx

from flowbot.flows.models import MessageData
from flowbot.rest.auth import DEFAULT_API_URL, auth_headers


class MessageManager:
    def __init__(
        self,
        token: str,
        organization: str = "",
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.organization = organization
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def send_message(self, message: MessageData) -> httpx.Response:
        """POST ``message``; raises ``httpx.HTTPStatusError`` when the API rejects it."""
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds) as client:
            response = await client.post(
                f"{self.api_url}/messages",
                headers=auth_headers(self.token),
                json=message.payload(),
            )
        response.raise_for_status()
        return response

    async def reply(self, flow: str, content: str, thread_id: str | None = None) -> httpx.Response:
        return await self.send_message(MessageData(flow=flow, content=content, thread_id=thread_id))
