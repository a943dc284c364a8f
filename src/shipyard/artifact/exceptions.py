"""Exceptions raised by the shipyard.artifact module.

Exception hierarchy::

    ShipyardError
        ArtifactError
            AssetOpenError
"""

from __future__ import annotations

from shipyard.config.exceptions import ShipyardError


class ArtifactError(ShipyardError):
    """Base exception for artifact registry errors."""


class AssetOpenError(ArtifactError):
    """An artifact's file could not be opened for reading.

    Attributes:
        artifact_name: Name of the artifact.
        path: Filesystem path that failed to open.
        reason: Description of the failure.
    """

    def __init__(self, artifact_name: str, path: str, reason: str) -> None:
        """Initialize AssetOpenError.

        Args:
            artifact_name: Name of the artifact.
            path: Filesystem path that failed to open.
            reason: Description of the failure.
        """
        super().__init__(f"Cannot open artifact '{artifact_name}' at {path}: {reason}")
        self.artifact_name = artifact_name
        self.path = path
        self.reason = reason


__all__ = [
    "ArtifactError",
    "AssetOpenError",
]
