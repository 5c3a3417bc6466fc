"""CLI commands for flowbot."""

import typer

from flowbot import __logo__

from . import flow_commands, stream_commands  # noqa: F401
from .core import app, console


@app.command()
def onboard() -> None:
    """Initialize flowbot configuration and an example commands file."""
    from flowbot.commands.loader import save_commands
    from flowbot.commands.schema import CommandsFile
    from flowbot.config.loader import get_config_path, save_config
    from flowbot.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    config = Config()
    save_config(config, config_path)
    console.print(f"[green]✓[/green] Created config at {config_path}")

    commands_path = config.commands_path
    if not commands_path.exists():
        save_commands(
            CommandsFile.model_validate(
                {
                    "commands": [
                        {"patternType": "word", "patterns": ["ping"], "description": "Health check"},
                        {
                            "patternType": "word",
                            "patterns": ["deploy"],
                            "description": "Deploy a service",
                            "subcommands": [
                                {
                                    "patterns": ["prod"],
                                    "params": [{"id": "build", "type": "int", "required": True}],
                                    "restrictions": {
                                        "rules": [{"concept": "include", "data": [{"name": "^release"}]}]
                                    },
                                }
                            ],
                        },
                    ]
                }
            ),
            commands_path,
        )
        console.print(f"[green]✓[/green] Created commands at {commands_path}")

    console.print(f"\n{__logo__} flowbot is ready!")
    console.print("\nNext steps:")
    console.print("  1. Add your API token to [cyan]~/.flowbot/config.json[/cyan]")
    console.print('  2. Try a command: [cyan]flowbot match "deploy prod 42"[/cyan]')
