"""Error taxonomy shared by the command engine and the stream listener."""

from __future__ import annotations

ERROR_TYPE_NO_COMMAND = "noCommand"
ERROR_TYPE_TRAILING_CONTENT = "trailingContent"


class FlowbotError(Exception):
    """Base class for all flowbot errors."""


class CommandError(FlowbotError):
    """A message could not be routed to a command.

    Carries the content that failed to match so error sinks can report it.
    """

    def __init__(self, error_type: str, message: str, content: str = ""):
        super().__init__(message)
        self.error_type = error_type
        self.content = content


class NoCommandMatch(CommandError):
    """No registered pattern matched the message (or the message was empty)."""

    def __init__(self, content: str):
        super().__init__(ERROR_TYPE_NO_COMMAND, f"no commands for '{content}'", content)


class TrailingContentError(CommandError):
    """A command matched but left content its subcommands/params could not consume."""

    def __init__(self, pattern: str, content: str):
        super().__init__(
            ERROR_TYPE_TRAILING_CONTENT,
            f"unexpected content after '{pattern}': '{content}'",
            content,
        )
        self.pattern = pattern


class CommandDefinitionError(FlowbotError, ValueError):
    """A command tree was registered with an invalid shape."""


class PatternCompileError(CommandDefinitionError):
    """A regex pattern failed to compile at registration time."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"invalid regex pattern {pattern!r}: {reason}")
        self.pattern = pattern


class EntryDecodeError(FlowbotError):
    """One stream line could not be decoded into an entry."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"failed to decode stream entry: {reason}")
        self.line = line


class StreamTransportError(FlowbotError):
    """Reading from the stream failed; the listener cannot continue."""
