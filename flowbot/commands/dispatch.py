"""Recursive command matching and outcome classification."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from flowbot.commands.node import Command
from flowbot.commands.params import ParamBindings, bind_params
from flowbot.errors import CommandError, NoCommandMatch, TrailingContentError


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchOutcome:
    """Result of one dispatch attempt."""

    command: Command | None
    """Matched command, or None when nothing matched."""

    pattern: str = ""
    """Exact pattern string that matched."""

    handler_type: str = "error"
    """Classification selecting the handler slot on ``command``."""

    content: str = ""
    """Content handed to the handler."""

    params: ParamBindings = field(default_factory=ParamBindings)
    groups: dict[str, str | None] = field(default_factory=dict)
    """Named groups captured by a regex pattern."""

    error: CommandError | None = None

    @property
    def matched(self) -> bool:
        return self.command is not None

    def summary(self) -> dict[str, Any]:
        """Plain-data view for logs and the CLI."""
        return {
            "command": self.command.name if self.command else None,
            "pattern": self.pattern,
            "handler": self.handler_type,
            "content": self.content,
            "params": dict(self.params),
            "groups": self.groups,
            "error": str(self.error) if self.error else None,
        }


def match_commands(
    commands: Sequence[Command],
    content: str,
    flow: str | None = None,
) -> MatchOutcome:
    """Match ``content`` posted on ``flow`` against ``commands``.

    Commands are tried in declaration order and the first one whose pattern
    matches decides the outcome; later siblings are never tried, even when the
    winner then fails on its subcommands, params or restrictions.
    """
    content = content.strip()
    if not content:
        return _no_match(content)

    words = content.split()
    for command in commands:
        hit = _match_pattern(command, content, words)
        if hit is None:
            continue
        pattern, residual, groups = hit

        if command.restrictions and not command.restrictions.can_execute(flow):
            return MatchOutcome(
                command=command,
                pattern=pattern,
                handler_type="restricted",
                content=content,
                groups=groups,
            )
        return _classify(command, pattern, content, residual, words[1:], groups, flow)

    return _no_match(content)


def _match_pattern(
    command: Command,
    content: str,
    words: list[str],
) -> tuple[str, str, dict[str, str | None]] | None:
    if command.pattern_type == "word":
        first = words[0].lower()
        for pattern in command.patterns:
            if first == pattern:
                return pattern, content[len(words[0]):].strip(), {}
        return None

    for pattern, matcher in zip(command.patterns, command.matchers):
        found = matcher.search(content)
        if found:
            # Regex commands consume the whole message; nothing is left to parse.
            return pattern, "", found.groupdict()
    return None


def _classify(
    command: Command,
    pattern: str,
    content: str,
    residual: str,
    arguments: list[str],
    groups: dict[str, str | None],
    flow: str | None,
) -> MatchOutcome:
    if command.subcommands and residual:
        child = match_commands(command.subcommands, residual, flow)
        if child.matched:
            return child
        return _trailing(command, pattern, residual, groups)

    if command.params:
        handler_type, bindings = bind_params(command.params, arguments)
        return MatchOutcome(
            command=command,
            pattern=pattern,
            handler_type=handler_type,
            content=content,
            params=bindings,
            groups=groups,
        )

    if not residual:
        return MatchOutcome(
            command=command,
            pattern=pattern,
            handler_type="default",
            content=content,
            groups=groups,
        )

    return _trailing(command, pattern, residual, groups)


def _trailing(command: Command, pattern: str, residual: str, groups: dict[str, str | None]) -> MatchOutcome:
    return MatchOutcome(
        command=command,
        pattern=pattern,
        handler_type="error",
        content=residual,
        groups=groups,
        error=TrailingContentError(pattern, residual),
    )


def _no_match(content: str) -> MatchOutcome:
    return MatchOutcome(command=None, content=content, error=NoCommandMatch(content))
