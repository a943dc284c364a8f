"""Artifact model and registry.

Every stage that produces a file registers it here; later stages select
what they need by type, group id or metadata without knowing who produced it.
"""

from shipyard.artifact.exceptions import ArtifactError, AssetOpenError
from shipyard.artifact.filters import (
    Filter,
    and_,
    by_ext,
    by_ids,
    by_type,
    or_,
)
from shipyard.artifact.models import SIDECAR_TYPES, Artifact, ArtifactExtras, ArtifactType
from shipyard.artifact.registry import ArtifactRegistry

__all__ = [
    "SIDECAR_TYPES",
    "Artifact",
    "ArtifactError",
    "ArtifactExtras",
    "ArtifactRegistry",
    "ArtifactType",
    "AssetOpenError",
    "Filter",
    "and_",
    "by_ext",
    "by_ids",
    "by_type",
    "or_",
]
