"""HTTP view for LockPilot."""

from lockpilot.server.app import create_app
from lockpilot.server.runner import ServerRunner

__all__ = [
    "ServerRunner",
    "create_app",
]
