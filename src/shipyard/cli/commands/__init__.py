"""Command implementations for the shipyard CLI."""

from shipyard.cli.commands.check import check
from shipyard.cli.commands.release import release

__all__ = [
    "check",
    "release",
]
