"""Reading users visible to the API token."""

from __future__ import annotations

import httpx

from flowbot.flows.models import User
from flowbot.rest.auth import DEFAULT_API_URL, auth_headers


class UserManager:
    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def get_all(self) -> list[User]:
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds) as client:
            response = await client.get(f"{self.api_url}/users", headers=auth_headers(self.token))
            response.raise_for_status()
            return [User.model_validate(item) for item in response.json()]
