"""Main CLI application."""

import typer

from lockpilot.cli.commands import config, serve, timers

app = typer.Typer(
    name="lockpilot",
    help="LockPilot - schedule popups, screen locks, shutdowns and reboots",
    no_args_is_help=True,
)

timers.register(app)
serve.register(app)
config.register(app)


if __name__ == "__main__":
    app()
