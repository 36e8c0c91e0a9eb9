"""Data models for repository and file tracking state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResolutionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_FLIGHT = "in_flight"
    DONE = "done"


@dataclass(frozen=True)
class RepositoryState:
    """Outcome of the one-time repository check for a gateway instance."""

    resolved: bool = False
    is_repository: bool = False


@dataclass(frozen=True)
class FileTrackingStatus:
    """Whether a file has to be treated as new (untracked or unreadable)."""

    is_new_file: bool
