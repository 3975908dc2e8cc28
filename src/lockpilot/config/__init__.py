"""Configuration module."""

from lockpilot.config.loader import get_default_config, load_config
from lockpilot.config.models import (
    ConfigError,
    LockPilotConfig,
    NotifierConfig,
    SchedulerConfig,
    ServerConfig,
    StoreConfig,
)
from lockpilot.config.paths import (
    get_config_path,
    get_lockpilot_home,
    get_logs_path,
    get_timers_path,
)

__all__ = [
    "ConfigError",
    "LockPilotConfig",
    "NotifierConfig",
    "SchedulerConfig",
    "ServerConfig",
    "StoreConfig",
    "get_config_path",
    "get_default_config",
    "get_lockpilot_home",
    "get_logs_path",
    "get_timers_path",
    "load_config",
]
