"""Base exceptions shared by every shipyard module.

Exception hierarchy::

    ShipyardError
        ConfigError (also ValueError)
            ConfigFileNotFoundError
            ConfigFormatError
"""

from __future__ import annotations


class ShipyardError(Exception):
    """Root of every exception raised by shipyard."""


class ConfigError(ShipyardError, ValueError):
    """Project configuration could not be loaded or is invalid."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """No configuration file was found at the requested location.

    Attributes:
        path: The path (or search locations) that were tried.
    """

    def __init__(self, path: str) -> None:
        """Initialize ConfigFileNotFoundError.

        Args:
            path: The path or list of locations that were searched.
        """
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigFormatError(ConfigError):
    """Configuration content has the wrong shape or type.

    Attributes:
        key: Dotted key of the offending value, when known.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        """Initialize ConfigFormatError.

        Args:
            message: Human-readable description of the problem.
            key: Dotted key of the offending value.
        """
        super().__init__(f"{key}: {message}" if key else message)
        self.key = key


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ShipyardError",
]
