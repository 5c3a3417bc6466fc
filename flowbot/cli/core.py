"""Shared CLI application context and setup helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from flowbot import __logo__, __version__
from flowbot.errors import CommandDefinitionError

if TYPE_CHECKING:
    from flowbot.commands.node import Command
    from flowbot.config.schema import Config

app = typer.Typer(
    name="flowbot",
    help=f"{__logo__} flowbot - command routing for Flowdock streams",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} flowbot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
    """flowbot - command routing for Flowdock streams."""
    # Existing environment variables take precedence over ~/.flowbot/.env
    load_dotenv(os.path.expanduser("~/.flowbot/.env"), override=False)


def require_token(config: Config) -> str:
    """Return the API token or exit with a hint."""
    if not config.api.token:
        console.print("[red]Error: No API token configured.[/red]")
        console.print("Set api.token in ~/.flowbot/config.json or FLOWBOT_API__TOKEN")
        raise typer.Exit(1)
    return config.api.token


def make_commands(path: Path) -> list[Command]:
    """Load the command tree, exiting on an invalid definition."""
    from flowbot.commands.loader import load_commands

    try:
        return load_commands(path)
    except (json.JSONDecodeError, ValidationError, CommandDefinitionError) as e:
        console.print(f"[red]Invalid commands file {path}:[/red] {e}")
        raise typer.Exit(1)
