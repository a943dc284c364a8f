"""Exceptions raised by the shipyard.archive module.

Exception hierarchy::

    ShipyardError
        ArchiveError
"""

from __future__ import annotations

from shipyard.config.exceptions import ShipyardError


class ArchiveError(ShipyardError):
    """An archive could not be read, rewritten or extended.

    Attributes:
        path: Entry or file involved, when known.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        """Initialize ArchiveError.

        Args:
            message: Error description.
            path: Entry or file involved, when known.
        """
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path


__all__ = [
    "ArchiveError",
]
