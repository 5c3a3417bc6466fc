"""Command matching and stream CLI commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from loguru import logger

from .core import app, console, make_commands, require_token


def _commands_path(path: Path | None) -> Path:
    from flowbot.config.loader import load_config

    return path or load_config().commands_path


@app.command("match")
def match_cmd(
    text: str = typer.Argument(..., help="Message text to route"),
    flow: str = typer.Option(None, "--flow", "-f", help="Flow ID the message arrives on"),
    commands_file: Path = typer.Option(None, "--commands", "-c", help="Commands file"),
) -> None:
    """Dry-run one message against the command tree and print the outcome."""
    from flowbot.commands.registry import CommandRegistry
    from flowbot.flows.directory import StaticFlowDirectory

    registry = CommandRegistry(make_commands(_commands_path(commands_file)))
    # Offline: name-based restrictions stay unresolved.
    registry.ready(StaticFlowDirectory())
    outcome = registry.match(text, flow)
    console.print_json(json.dumps(outcome.summary(), ensure_ascii=False))
    if not outcome.matched:
        raise typer.Exit(1)


@app.command("listen")
def listen_cmd(
    commands_file: Path = typer.Option(None, "--commands", "-c", help="Commands file"),
) -> None:
    """Listen to the configured flows and log every routed message."""
    from flowbot.app.bootstrap import build_runtime, run
    from flowbot.commands.node import HANDLER_TYPES
    from flowbot.config.loader import load_config
    from flowbot.errors import StreamTransportError

    config = load_config()
    require_token(config)
    if not config.stream.flows:
        console.print("[red]Error: No flows configured.[/red] Set stream.flows in ~/.flowbot/config.json")
        raise typer.Exit(1)

    commands = make_commands(commands_file or config.commands_path)
    if not commands:
        console.print("[yellow]No commands registered; every message will be reported as unmatched[/yellow]")

    def log_outcome(outcome, entry) -> None:
        logger.info(
            "[{}] {} -> {} {}",
            entry.flow,
            outcome.pattern,
            outcome.handler_type,
            dict(outcome.params) or outcome.content,
        )

    for root in commands:
        for node in root.walk():
            for handler_type in HANDLER_TYPES:
                node.on(handler_type, log_outcome)

    runtime = build_runtime(config, commands)
    console.print(f"Listening on {', '.join(config.stream.flows)} (Ctrl+C to stop)")
    try:
        asyncio.run(run(runtime))
    except StreamTransportError as e:
        console.print(f"[red]Stream failed:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\nStopped")
