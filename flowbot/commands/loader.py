"""Command file loading utilities."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from flowbot.commands.node import Command
from flowbot.commands.params import Param
from flowbot.commands.restrictions import RestrictionEntry, RestrictionRule, Restrictions
from flowbot.commands.schema import CommandsFile, CommandSpec


def get_commands_path() -> Path:
    """Get the default commands file path."""
    return Path.home() / ".flowbot" / "commands.json"


def load_commands(path: Path | None = None) -> list[Command]:
    """Load command definitions from disk. Returns no commands when the file is missing."""
    commands_path = path or get_commands_path()
    if not commands_path.exists():
        logger.warning(f"Commands file not found: {commands_path}")
        return []
    with open(commands_path) as f:
        data = json.load(f)
    spec = CommandsFile.model_validate(data)
    return [build_command(item) for item in spec.commands]


def save_commands(spec: CommandsFile, path: Path | None = None) -> None:
    """Save command definitions to disk."""
    commands_path = path or get_commands_path()
    commands_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = commands_path.with_suffix(f"{commands_path.suffix}.tmp")
    with open(tmp_path, "w") as f:
        json.dump(spec.model_dump(by_alias=True), f, indent=2)
    tmp_path.replace(commands_path)


def build_command(spec: CommandSpec) -> Command:
    """Build a command tree (without handlers) from its definition."""
    restrictions = Restrictions(
        rules=tuple(
            RestrictionRule(
                rule.concept,
                tuple(RestrictionEntry(id=entry.id, name=entry.name) for entry in rule.entries),
            )
            for rule in spec.restrictions.rules
        ),
        mode=spec.restrictions.mode,
    )
    return Command(
        spec.pattern_type,
        spec.patterns,
        description=spec.description,
        params=[
            Param(id=p.id, description=p.description, type=p.type, required=p.required)
            for p in spec.params
        ],
        subcommands=[build_command(sub) for sub in spec.subcommands],
        restrictions=restrictions,
    )
