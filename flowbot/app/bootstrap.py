"""Application bootstrap and runtime wiring."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx
from loguru import logger

from flowbot.commands.registry import CommandRegistry
from flowbot.errors import StreamTransportError
from flowbot.rest.flows import FlowManager
from flowbot.rest.messages import MessageManager
from flowbot.rest.users import UserManager
from flowbot.stream.listener import StreamListener
from flowbot.stream.source import HttpStreamSource, stream_url

if TYPE_CHECKING:
    from flowbot.commands.node import Command
    from flowbot.config.schema import Config


@dataclass(slots=True)
class Runtime:
    """Everything needed to run one bot against one stream."""

    config: Config
    registry: CommandRegistry
    flows: FlowManager
    messages: MessageManager
    users: UserManager
    listener: StreamListener
    errors: asyncio.Queue[Exception]
    transport: httpx.AsyncBaseTransport | None = None

    def source(self) -> HttpStreamSource:
        url = stream_url(self.config.stream.flows, self.config.api.stream_url, self.config.stream.active)
        return HttpStreamSource(
            url,
            self.config.api.token,
            connect_timeout_seconds=self.config.api.timeout_seconds,
            transport=self.transport,
        )


def build_runtime(
    config: Config,
    commands: list[Command] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Runtime:
    """Wire managers, registry and listener from ``config``."""
    api = config.api
    registry = CommandRegistry(commands)
    errors: asyncio.Queue[Exception] = asyncio.Queue(maxsize=config.stream.error_queue_size)
    return Runtime(
        config=config,
        registry=registry,
        flows=FlowManager(api.token, api.api_url, api.timeout_seconds, transport=transport),
        messages=MessageManager(api.token, api.organization, api.api_url, api.timeout_seconds, transport=transport),
        users=UserManager(api.token, api.api_url, api.timeout_seconds, transport=transport),
        listener=StreamListener(registry, errors, events=config.stream.events, user=config.stream.user),
        errors=errors,
        transport=transport,
    )


async def _drain_errors(errors: asyncio.Queue[Exception]) -> None:
    while True:
        error = await errors.get()
        logger.warning(f"{type(error).__name__}: {error}")


async def run(runtime: Runtime) -> None:
    """Resolve restrictions against the live flow list, then listen until the stream ends."""
    try:
        await runtime.flows.get_flows()
    except httpx.HTTPError as e:
        raise StreamTransportError(f"Failed to fetch flows: {e}") from e
    runtime.registry.ready(runtime.flows)

    drain = asyncio.create_task(_drain_errors(runtime.errors))
    try:
        await runtime.listener.listen(runtime.source())
    finally:
        drain.cancel()
        try:
            await drain
        except asyncio.CancelledError:
            pass
