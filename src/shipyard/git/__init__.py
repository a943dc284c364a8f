"""Version-control collaborator used by the release stages."""

from shipyard.git.client import GitClient, GitInfo
from shipyard.git.exceptions import GitError

__all__ = [
    "GitClient",
    "GitError",
    "GitInfo",
]
