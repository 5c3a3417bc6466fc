"""Command grammar, matching and dispatch."""

from flowbot.commands.dispatch import MatchOutcome, match_commands
from flowbot.commands.node import HANDLER_TYPES, Command, regex, word
from flowbot.commands.params import Param, ParamBindings, bind_params
from flowbot.commands.registry import CommandRegistry
from flowbot.commands.restrictions import (
    RestrictionEntry,
    RestrictionRule,
    Restrictions,
    exclude,
    include,
    resolve_restrictions,
)

__all__ = [
    "HANDLER_TYPES",
    "Command",
    "CommandRegistry",
    "MatchOutcome",
    "Param",
    "ParamBindings",
    "RestrictionEntry",
    "RestrictionRule",
    "Restrictions",
    "bind_params",
    "exclude",
    "include",
    "match_commands",
    "regex",
    "resolve_restrictions",
    "word",
]
