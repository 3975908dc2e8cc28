"""Configuration models using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lockpilot.config.paths import get_timers_path


class ConfigError(Exception):
    """Configuration error."""

    pass


class SchedulerConfig(BaseModel):
    """Configuration for the timer tick loop."""

    # Seconds between ticks; 1s keeps countdowns accurate without busy polling
    poll_interval: float = Field(default=1.0, gt=0)


class StoreConfig(BaseModel):
    """Configuration for timer storage.

    The file backend lets the CLI and a running server share one timer list.
    """

    backend: Literal["memory", "file"] = "file"
    path: Path = Field(default_factory=get_timers_path)

    @field_validator("path")
    @classmethod
    def _expand_path(cls, value: Path) -> Path:
        return value.expanduser()


class NotifierConfig(BaseModel):
    """Configuration for the notifier that performs fired actions."""

    kind: Literal["auto", "log", "macos"] = "auto"
    dialog_title: str = "LockPilot"


class ServerConfig(BaseModel):
    """Configuration for the local HTTP view."""

    host: str = "127.0.0.1"
    port: int = Field(default=8765, ge=1, le=65535)


class LockPilotConfig(BaseModel):
    """Root configuration model."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
