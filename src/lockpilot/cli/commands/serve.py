"""Serve command: HTTP view plus the timer scheduler."""

from pathlib import Path
from typing import Annotated

import typer

from lockpilot.cli.console import dim, error


def register(app: typer.Typer) -> None:
    """Register the serve command."""

    @app.command()
    def serve(
        config: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="Path to configuration file"),
        ] = None,
        host: Annotated[
            str | None,
            typer.Option("--host", "-h", help="Host to bind to"),
        ] = None,
        port: Annotated[
            int | None,
            typer.Option("--port", "-p", help="Port to bind to"),
        ] = None,
    ) -> None:
        """Run the timer scheduler and the local HTTP API."""
        import asyncio

        from lockpilot.config import ConfigError, load_config
        from lockpilot.logging import configure_logging
        from lockpilot.runtime import create_runtime
        from lockpilot.server import ServerRunner, create_app

        try:
            loaded = load_config(config)
        except (FileNotFoundError, ConfigError) as e:
            error(str(e))
            raise typer.Exit(1) from None

        configure_logging(loaded.log_level, use_rich=True, log_to_file=True)

        runtime = create_runtime(loaded)
        bind_host = host or loaded.server.host
        bind_port = port or loaded.server.port
        dim(f"Serving on http://{bind_host}:{bind_port}")

        runner = ServerRunner(create_app(runtime), host=bind_host, port=bind_port)
        asyncio.run(runner.run())
