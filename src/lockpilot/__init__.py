"""LockPilot - schedule one-shot popups, screen locks, shutdowns and reboots."""

__version__ = "0.1.0"
