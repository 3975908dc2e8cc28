"""Command-line view for LockPilot."""
