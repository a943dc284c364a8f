"""Command-line interface for shipyard."""

from shipyard.cli.app import app

__all__ = [
    "app",
]
