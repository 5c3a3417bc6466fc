"""Command tree nodes."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from flowbot.commands.params import PARAM_TYPES, Param
from flowbot.commands.restrictions import Restrictions
from flowbot.errors import CommandDefinitionError, PatternCompileError

if TYPE_CHECKING:
    from flowbot.commands.dispatch import MatchOutcome
    from flowbot.flows.models import Entry

PatternType: TypeAlias = Literal["word", "regex"]
HandlerType: TypeAlias = Literal[
    "default",
    "error",
    "restricted",
    "params",
    "params_wrong_type",
    "params_missing",
    "params_extra",
]
CommandHandler: TypeAlias = Callable[["MatchOutcome", "Entry"], Awaitable[None] | None]

PATTERN_TYPES: tuple[str, ...] = ("word", "regex")
HANDLER_TYPES: tuple[str, ...] = (
    "default",
    "error",
    "restricted",
    "params",
    "params_wrong_type",
    "params_missing",
    "params_extra",
)


@dataclass(slots=True, eq=False)
class Command:
    """One routable command: patterns, params or subcommands, restrictions and handlers.

    Word patterns are lower-cased and regex patterns compiled on construction,
    so an invalid pattern fails before the command can be registered.
    """

    pattern_type: PatternType
    patterns: Sequence[str]
    description: str = ""
    params: Sequence[Param] = ()
    subcommands: Sequence[Command] = ()
    restrictions: Restrictions = field(default_factory=Restrictions)
    handlers: dict[str, CommandHandler] = field(default_factory=dict)
    _matchers: tuple[re.Pattern[str], ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        if isinstance(self.patterns, str):
            self.patterns = (self.patterns,)
        self.patterns = tuple(self.patterns)
        self.params = tuple(self.params)
        self.subcommands = tuple(self.subcommands)

        if self.pattern_type not in PATTERN_TYPES:
            raise CommandDefinitionError(f"unknown pattern type {self.pattern_type!r}")
        if not self.patterns:
            raise CommandDefinitionError("a command needs at least one pattern")
        if self.params and self.subcommands:
            raise CommandDefinitionError(
                f"command {self.patterns[0]!r} declares both params and subcommands"
            )
        for param in self.params:
            if param.type not in PARAM_TYPES:
                raise CommandDefinitionError(f"unknown param type {param.type!r} for {param.id!r}")
        for name in self.handlers:
            if name not in HANDLER_TYPES:
                raise CommandDefinitionError(f"unknown handler slot {name!r}")

        if self.pattern_type == "word":
            self.patterns = tuple(pattern.lower() for pattern in self.patterns)
            self._matchers = ()
        else:
            self._matchers = tuple(_compile(pattern) for pattern in self.patterns)

    @property
    def name(self) -> str:
        return self.patterns[0]

    @property
    def matchers(self) -> tuple[re.Pattern[str], ...]:
        """Compiled regexes, index-aligned with ``patterns``."""
        return self._matchers

    def on(self, handler_type: HandlerType, handler: CommandHandler) -> Command:
        """Bind ``handler`` to one classification slot; returns self for chaining."""
        if handler_type not in HANDLER_TYPES:
            raise CommandDefinitionError(f"unknown handler slot {handler_type!r}")
        self.handlers[handler_type] = handler
        return self

    def handler_for(self, handler_type: str) -> CommandHandler | None:
        return self.handlers.get(handler_type)

    def add_subcommand(self, sub: Command) -> Command:
        if self.params:
            raise CommandDefinitionError(
                f"command {self.name!r} declares params and cannot take subcommands"
            )
        self.subcommands = (*self.subcommands, sub)
        return self

    def copy_with(self, **changes: Any) -> Command:
        """Shallow copy with ``changes`` applied; handlers are shared with the original."""
        return replace(self, **changes)

    def walk(self):
        """Yield this command and every descendant, depth first."""
        yield self
        for sub in self.subcommands:
            yield from sub.walk()


def word(*patterns: str, **kwargs: Any) -> Command:
    """Shortcut for a first-word command."""
    return Command("word", patterns, **kwargs)


def regex(*patterns: str, **kwargs: Any) -> Command:
    """Shortcut for a regular-expression command."""
    return Command("regex", patterns, **kwargs)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompileError(pattern, str(e)) from e
