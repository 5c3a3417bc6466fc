"""Flowdock REST CLI commands."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.table import Table

from .core import app, console, require_token


@app.command("flows")
def flows_cmd() -> None:
    """List flows visible to the API token."""
    from flowbot.config.loader import load_config
    from flowbot.rest.flows import FlowManager

    config = load_config()
    manager = FlowManager(require_token(config), config.api.api_url, config.api.timeout_seconds)
    try:
        flows = asyncio.run(manager.get_flows())
    except httpx.HTTPError as e:
        console.print(f"[red]Failed to fetch flows:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Flows")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Stream filter", style="green")
    table.add_column("Joined")
    for flow in flows:
        table.add_row(flow.id, flow.name, flow.stream_filter, "✓" if flow.joined else "")
    console.print(table)


@app.command("users")
def users_cmd() -> None:
    """List users visible to the API token."""
    from flowbot.config.loader import load_config
    from flowbot.rest.users import UserManager

    config = load_config()
    manager = UserManager(require_token(config), config.api.api_url, config.api.timeout_seconds)
    try:
        users = asyncio.run(manager.get_all())
    except httpx.HTTPError as e:
        console.print(f"[red]Failed to fetch users:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Nick")
    table.add_column("Name")
    table.add_column("Email", style="dim")
    for user in users:
        table.add_row(str(user.id), user.nick, user.name, user.email)
    console.print(table)


@app.command("send")
def send_cmd(
    flow: str = typer.Option(..., "--flow", "-f", help="Flow ID"),
    content: str = typer.Option(..., "--content", "-m", help="Message text"),
    thread_id: str = typer.Option(None, "--thread", help="Reply in this thread"),
    tags: list[str] = typer.Option(None, "--tag", help="Tag to attach (repeatable)"),
) -> None:
    """Post a message to a flow."""
    from flowbot.config.loader import load_config
    from flowbot.flows.models import MessageData
    from flowbot.rest.messages import MessageManager

    config = load_config()
    manager = MessageManager(
        require_token(config),
        config.api.organization,
        config.api.api_url,
        config.api.timeout_seconds,
    )
    message = MessageData(flow=flow, content=content, thread_id=thread_id, tags=tags or [])
    try:
        asyncio.run(manager.send_message(message))
    except httpx.HTTPError as e:
        console.print(f"[red]Failed to send message:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Sent to {flow}")
