"""Registration surface for command trees."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from loguru import logger

from flowbot.commands.dispatch import MatchOutcome, match_commands
from flowbot.commands.node import Command
from flowbot.commands.restrictions import resolve_restrictions
from flowbot.errors import CommandDefinitionError

if TYPE_CHECKING:
    from flowbot.flows.directory import FlowDirectory


class CommandRegistry:
    """Holds the registered command tree and runs matches against it.

    Typical lifecycle: ``add`` every command and bind its handlers, call
    ``ready`` once with a flow directory, then ``match`` per message.
    """

    def __init__(self, commands: list[Command] | None = None):
        self._commands: list[Command] = []
        self._lock = threading.Lock()
        self._ready = False
        for command in commands or []:
            self.add(command)

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def is_ready(self) -> bool:
        return self._ready

    def add(self, command: Command) -> Command:
        """Register a root command.

        Patterns are compiled when the command is built, so an invalid regex has
        already raised ``PatternCompileError`` by the time it reaches here.
        """
        seen: set[int] = set()
        for node in command.walk():
            if id(node) in seen:
                raise CommandDefinitionError(f"command {node.name!r} appears twice in one tree")
            seen.add(id(node))
        with self._lock:
            self._commands.append(command)
            self._ready = False
        return command

    def ready(self, directory: FlowDirectory) -> None:
        """Resolve restriction flow names against ``directory`` for the whole tree."""
        with self._lock:
            self._commands = resolve_restrictions(self._commands, directory)
            self._ready = True
            unresolved = [
                name
                for root in self._commands
                for node in root.walk()
                for name in node.restrictions.unresolved()
            ]
        if unresolved:
            logger.warning(f"Unresolved restriction flow names: {', '.join(unresolved)}")
        logger.info(f"Command registry ready: {len(self._commands)} root command(s)")

    def match(self, content: str, flow: str | None = None) -> MatchOutcome:
        """Match one message; at most one match runs at a time per registry."""
        with self._lock:
            outcome = match_commands(self._commands, content, flow)
        logger.debug(
            "Dispatch {!r} on flow {} -> {} ({})",
            content,
            flow,
            outcome.handler_type,
            outcome.pattern or "no command",
        )
        return outcome
