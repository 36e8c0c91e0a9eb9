"""Fail-open view of the version-control backend used by the diff engine.

Every query degrades to the answer that forces full re-encryption: no
repository, file not tracked, no committed baseline. Nothing here raises.
The repository check runs once per gateway; concurrent first callers share
the same in-flight task.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from cipherdiff.git.adapter import GitAdapter, GitError, VersionControl
from cipherdiff.git.models import FileTrackingStatus, RepositoryState, ResolutionState
from cipherdiff.lines import split_lines

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class VersionControlGateway:
    """Memoized, fail-open repository queries for one workspace."""

    def __init__(self, workspace: PathLike, vcs: Optional[VersionControl] = None) -> None:
        self.workspace = Path(workspace)
        self._vcs: VersionControl = vcs if vcs is not None else GitAdapter(self.workspace)
        self._state = ResolutionState.NOT_STARTED
        self._pending: Optional[asyncio.Future[bool]] = None
        self._repository = RepositoryState()

    # ---- repository state ----

    @property
    def repository_state(self) -> RepositoryState:
        return self._repository

    @property
    def resolution_state(self) -> ResolutionState:
        return self._state

    async def detect_repository(self) -> bool:
        """Return whether the workspace is inside a git work tree."""
        if self._state is ResolutionState.DONE:
            return self._repository.is_repository

        if self._pending is not None and self._is_abandoned(self._pending):
            # A cancelled check is not a result; start over.
            logger.debug("Repository check for %s was abandoned, retrying", self.workspace)
            self._pending = None
            self._state = ResolutionState.NOT_STARTED

        # No await between the check and the assignment: first caller wins.
        if self._pending is None:
            self._state = ResolutionState.IN_FLIGHT
            self._pending = asyncio.ensure_future(self._resolve())

        # shield: a cancelled caller must not cancel the shared check
        return await asyncio.shield(self._pending)

    @staticmethod
    def _is_abandoned(pending: "asyncio.Future[bool]") -> bool:
        """True if *pending* was cancelled or belongs to an event loop that is gone."""
        if pending.cancelled():
            return True
        return not pending.done() and pending.get_loop() is not asyncio.get_running_loop()

    async def _resolve(self) -> bool:
        try:
            is_repo = await asyncio.to_thread(self._vcs.is_inside_repository)
        except (GitError, OSError) as exc:
            logger.debug("Repository check failed for %s: %s", self.workspace, exc)
            is_repo = False

        self._repository = RepositoryState(resolved=True, is_repository=is_repo)
        self._state = ResolutionState.DONE
        logger.debug("Workspace %s is_repository=%s", self.workspace, is_repo)
        return is_repo

    def get_is_git_repository(self) -> bool:
        """Last resolved repository state (False until resolution finishes)."""
        return self._repository.is_repository

    # ---- per-file queries ----

    def relative_path(self, path: PathLike) -> str:
        """Express *path* relative to the workspace, in posix form."""
        p = Path(path)
        if p.is_absolute():
            try:
                p = p.resolve().relative_to(self.workspace.resolve())
            except ValueError:
                return p.as_posix()
        return p.as_posix()

    async def is_file_tracked(self, path: PathLike) -> bool:
        if not await self.detect_repository():
            return False
        rel = self.relative_path(path)
        try:
            return await asyncio.to_thread(self._vcs.is_tracked, rel)
        except (GitError, OSError) as exc:
            logger.debug("Treating %s as untracked: %s", rel, exc)
            return False

    async def get_tracking_status(self, path: PathLike) -> FileTrackingStatus:
        return FileTrackingStatus(is_new_file=not await self.is_file_tracked(path))

    async def fetch_committed_content(self, path: PathLike) -> List[str]:
        """Return the HEAD version of *path* split into lines, or [] if unavailable."""
        if not await self.detect_repository():
            return []
        rel = self.relative_path(path)
        try:
            text = await asyncio.to_thread(self._vcs.committed_content, rel)
        except (GitError, OSError) as exc:
            logger.debug("No committed baseline for %s: %s", rel, exc)
            return []
        if not text:
            return []
        return split_lines(text)
