"""Release stages shipped with shipyard.

Examples:
    >>> from shipyard.stages import default_stages
    >>> [str(stage) for stage in default_stages()]
    ['creating source archive', 'http upload', 'artifactory']
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from shipyard.stages.artifactory import ArtifactoryStage, check_artifactory_response
from shipyard.stages.sourcearchive import SourceArchiveStage
from shipyard.stages.upload import UploadStage

if TYPE_CHECKING:
    from shipyard.git.client import GitClient
    from shipyard.pipeline.base import Stage


def default_stages(git: GitClient | None = None) -> list[Stage]:
    """Return the release stages in execution order."""
    return [SourceArchiveStage(git), UploadStage(), ArtifactoryStage()]


__all__ = [
    "ArtifactoryStage",
    "SourceArchiveStage",
    "UploadStage",
    "check_artifactory_response",
    "default_stages",
]
