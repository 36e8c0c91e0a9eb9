"""Git interface layer — subprocess adapter, fail-open gateway, models."""

from cipherdiff.git.adapter import GitAdapter, GitError, VersionControl
from cipherdiff.git.gateway import VersionControlGateway
from cipherdiff.git.models import FileTrackingStatus, RepositoryState, ResolutionState

__all__ = [
    "FileTrackingStatus",
    "GitAdapter",
    "GitError",
    "RepositoryState",
    "ResolutionState",
    "VersionControl",
    "VersionControlGateway",
]
