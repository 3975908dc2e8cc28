"""Timer management commands."""

import re
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Annotated

import typer

from lockpilot.cli.console import console, create_table, dim, error, success, warning

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd])\s*$")
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to configuration file"),
]


def format_remaining(target: datetime, now: datetime | None = None) -> str:
    """Format the countdown shown next to each timer."""
    now = now or datetime.now(UTC)
    remaining = (target - now).total_seconds()
    if remaining <= 0:
        return "due now"

    total = int(remaining)

    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes}m {seconds}s"


def parse_duration(value: str) -> timedelta:
    """Parse a relative duration such as ``90s``, ``10m``, ``2h`` or ``1d``.

    Raises:
        ValueError: If the value is not a single number with a unit suffix.
    """
    match = _DURATION_RE.match(value)
    if not match:
        raise ValueError(f"Invalid duration {value!r} (expected e.g. 30s, 10m, 2h, 1d)")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def _load_service(config_path: Path | None):
    from lockpilot.config import ConfigError, load_config
    from lockpilot.runtime import create_service

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        error(str(e))
        raise typer.Exit(1) from None
    if config.store.backend == "memory":
        warning("Store backend is 'memory'; timers will not outlive this command")
    return create_service(config)


def register(app: typer.Typer) -> None:
    """Register the timers command group."""
    timers_app = typer.Typer(help="Create, list and cancel timers", no_args_is_help=True)

    @timers_app.command("list")
    def timers_list(config: ConfigOption = None) -> None:
        """List pending timers with their countdowns."""
        service = _load_service(config)
        records = service.list()

        if not records:
            warning("No active timers.")
            return

        now = service.clock.now()
        table = create_table(
            "Active timers",
            [
                ("ID", {"style": "dim", "no_wrap": True}),
                ("Action", "bold"),
                ("Runs At", ""),
                ("Remaining", ""),
                ("Message", ""),
            ],
        )
        for record in records:
            table.add_row(
                record.id,
                record.action.value.upper(),
                record.target_time.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
                format_remaining(record.target_time, now),
                record.message or "",
            )
        console.print(table)

    @timers_app.command("create")
    def timers_create(
        action: Annotated[
            str,
            typer.Option("--action", "-a", help="popup, lock, shutdown or reboot"),
        ] = "popup",
        at: Annotated[
            str | None,
            typer.Option("--at", help="Target instant, ISO-8601 with UTC offset"),
        ] = None,
        in_: Annotated[
            str | None,
            typer.Option("--in", help="Relative delay, e.g. 30s, 10m, 2h"),
        ] = None,
        message: Annotated[
            str | None,
            typer.Option("--message", "-m", help="Popup message"),
        ] = None,
        config: ConfigOption = None,
    ) -> None:
        """Create a timer.

        Examples:
            lockpilot timers create --at 2030-01-01T09:00:00Z -m "Stand up"
            lockpilot timers create --action lock --in 25m
        """
        from lockpilot.timers import CreateTimerRequest, ValidationError

        if (at is None) == (in_ is None):
            error("Pass exactly one of --at or --in")
            raise typer.Exit(1)

        service = _load_service(config)

        target: str | datetime | None = at
        if in_ is not None:
            try:
                target = service.clock.now() + parse_duration(in_)
            except ValueError as e:
                error(str(e))
                raise typer.Exit(1) from None

        try:
            record = service.create(
                CreateTimerRequest(action=action, target_time=target, message=message)
            )
        except ValidationError as e:
            error(str(e))
            raise typer.Exit(1) from None

        success(f"Timer created: {record.id}")
        dim(
            f"{record.action.value} at {record.target_time.isoformat()} "
            f"({format_remaining(record.target_time, service.clock.now())})"
        )

    @timers_app.command("cancel")
    def timers_cancel(
        timer_id: Annotated[str, typer.Argument(help="Timer ID")],
        config: ConfigOption = None,
    ) -> None:
        """Cancel a pending timer."""
        from lockpilot.timers import NotFoundError

        service = _load_service(config)
        try:
            service.cancel(timer_id)
        except NotFoundError as e:
            error(str(e))
            raise typer.Exit(1) from None
        success("Timer canceled.")

    app.add_typer(timers_app, name="timers")
