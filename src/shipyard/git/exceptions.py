"""Exceptions raised by the shipyard.git module."""

from __future__ import annotations

from shipyard.config.exceptions import ShipyardError


class GitError(ShipyardError):
    """A git command failed.

    Attributes:
        args: The git arguments that were run.
        stderr: Captured standard error.
    """

    def __init__(self, args: list[str], stderr: str) -> None:
        """Initialize GitError.

        Args:
            args: The git arguments that were run.
            stderr: Captured standard error.
        """
        super().__init__(f"git {' '.join(args)} failed: {stderr.strip() or 'unknown error'}")
        self.git_args = list(args)
        self.stderr = stderr


__all__ = [
    "GitError",
]
