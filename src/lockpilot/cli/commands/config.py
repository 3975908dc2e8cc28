"""Configuration commands."""

from pathlib import Path
from typing import Annotated

import typer

from lockpilot.cli.console import console, error, success


def register(app: typer.Typer) -> None:
    """Register the config command group."""
    config_app = typer.Typer(help="Inspect configuration", no_args_is_help=True)

    @config_app.command("validate")
    def config_validate(
        path: Annotated[
            Path | None,
            typer.Option("--path", "-p", help="Config file to validate"),
        ] = None,
    ) -> None:
        """Validate a configuration file."""
        from lockpilot.config import ConfigError, load_config

        try:
            load_config(path)
        except (FileNotFoundError, ConfigError) as e:
            error(str(e))
            raise typer.Exit(1) from None
        success("Configuration is valid")

    @config_app.command("show")
    def config_show(
        path: Annotated[
            Path | None,
            typer.Option("--path", "-p", help="Config file to load"),
        ] = None,
    ) -> None:
        """Print the effective configuration as JSON."""
        from lockpilot.config import ConfigError, load_config

        try:
            config = load_config(path)
        except (FileNotFoundError, ConfigError) as e:
            error(str(e))
            raise typer.Exit(1) from None
        console.print_json(config.model_dump_json())

    app.add_typer(config_app, name="config")
