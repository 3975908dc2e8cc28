"""Centralized path management for LockPilot.

All state (config, timers, logs) lives under one base directory, which can be
overridden with the LOCKPILOT_HOME environment variable.

Default location: ~/.lockpilot
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "LOCKPILOT_HOME"


@lru_cache(maxsize=1)
def get_lockpilot_home() -> Path:
    """Get the base directory for all LockPilot data.

    Resolution order:
    1. LOCKPILOT_HOME environment variable (if set)
    2. ~/.lockpilot
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".lockpilot"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_lockpilot_home() / "config.toml"


def get_timers_path() -> Path:
    """Get the default JSONL timer store path."""
    return get_lockpilot_home() / "timers.jsonl"


def get_logs_path() -> Path:
    return get_lockpilot_home() / "logs"
