"""REST-backed flow directory."""

from __future__ import annotations

import httpx
from loguru import logger

from flowbot.flows.directory import find_flow
from flowbot.flows.models import Flow
from flowbot.rest.auth import DEFAULT_API_URL, auth_headers


class FlowManager:
    """Fetches the flows visible to an API token and answers directory lookups.

    Lookups only see the flows cached by the last :meth:`get_flows` call.
    """

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
        self._flows: list[Flow] = []
        self._by_id: dict[str, Flow] = {}

    def set_token(self, token: str) -> None:
        self.token = token

    async def get_flows(self) -> list[Flow]:
        """Read all visible flows and refresh the cache."""
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout_seconds) as client:
            response = await client.get(f"{self.api_url}/flows", headers=auth_headers(self.token))
            response.raise_for_status()
            payload = response.json()

        flows = [Flow.model_validate(item) for item in payload]
        self._flows = flows
        for flow in flows:
            self._by_id[flow.id] = flow
        logger.info(f"Loaded {len(flows)} flow(s)")
        return flows

    def get_by_id(self, flow_id: str) -> Flow | None:
        return self._by_id.get(flow_id)

    def lookup_by_name(self, pattern: str) -> Flow | None:
        return find_flow(self._flows, pattern)

    def list_all(self) -> list[Flow]:
        return list(self._flows)
