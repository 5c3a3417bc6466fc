"""Ingestion loop: framed stream lines in, command handlers out."""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import AsyncIterable, Iterable

from loguru import logger
from pydantic import ValidationError

from flowbot.commands.dispatch import MatchOutcome
from flowbot.commands.registry import CommandRegistry
from flowbot.errors import EntryDecodeError, StreamTransportError
from flowbot.flows.models import Entry


class StreamListener:
    """
    Reads one entry at a time, dispatches it and runs the selected handler.

    Per-message problems (bad JSON, unmatched content, failing handlers) are
    pushed to the ``errors`` queue without blocking; a full or missing queue
    drops them. Only a failing transport ends :meth:`listen` with an error.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        errors: asyncio.Queue[Exception] | None = None,
        events: Iterable[str] | None = ("message",),
        user: str | None = None,
    ):
        self.registry = registry
        self.errors = errors
        self.events = frozenset(events) if events is not None else None
        self.user = user
        self._stop = asyncio.Event()
        self._running = False
        self._dropped_errors = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def dropped_errors(self) -> int:
        """Errors discarded because the queue was full."""
        return self._dropped_errors

    def stop(self) -> None:
        """Ask the loop to return before reading the next line."""
        self._stop.set()

    async def listen(self, source: AsyncIterable[str]) -> None:
        """Consume ``source`` until it ends, :meth:`stop` is called, or the transport fails."""
        self._stop.clear()
        self._running = True
        lines = aiter(source)
        try:
            while not self._stop.is_set():
                try:
                    line = await anext(lines)
                except StopAsyncIteration:
                    logger.info("Stream ended")
                    return
                except StreamTransportError as e:
                    logger.error(f"Stream transport failed: {e}")
                    raise
                except Exception as e:
                    logger.error(f"Stream transport failed: {e}")
                    raise StreamTransportError(str(e)) from e

                await self.handle_line(line)
            logger.info("Stream listener stopped")
        finally:
            self._running = False
            close = getattr(lines, "aclose", None)
            if close is not None:
                await close()

    async def handle_line(self, line: str) -> MatchOutcome | None:
        """Decode and dispatch one framed line; blank keep-alive lines are skipped."""
        if not line.strip():
            return None
        try:
            entry = Entry.model_validate_json(line)
        except ValidationError as e:
            logger.warning(f"Invalid stream entry: {e.error_count()} error(s)")
            self._report(EntryDecodeError(line, str(e)))
            return None
        return await self.handle_entry(entry)

    async def handle_entry(self, entry: Entry) -> MatchOutcome | None:
        if self.events is not None and entry.event and entry.event not in self.events:
            return None
        if self.user is not None and entry.user is not None and str(entry.user) == self.user:
            return None

        outcome = self.registry.match(entry.content, entry.flow)
        if outcome.command is None:
            if outcome.error is not None:
                self._report(outcome.error)
            return outcome

        handler = outcome.command.handler_for(outcome.handler_type)
        if handler is None:
            return outcome

        try:
            result = handler(outcome, entry)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Handler '{outcome.handler_type}' for {outcome.pattern!r} failed: {e}")
            self._report(e)
        return outcome

    def _report(self, error: Exception) -> None:
        if self.errors is None:
            return
        try:
            self.errors.put_nowait(error)
        except asyncio.QueueFull:
            self._dropped_errors += 1
            if self._dropped_errors == 1 or self._dropped_errors % 100 == 0:
                logger.warning(f"Error queue full: dropped={self._dropped_errors}")
