"""Git subprocess wrapper — repository check, tracked status, committed content."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Protocol


class GitError(Exception):
    """Raised when git is unavailable or a query exits non-zero."""


class VersionControl(Protocol):
    """Read-only queries the gateway needs from a version-control backend."""

    def is_inside_repository(self) -> bool: ...

    def is_tracked(self, relative_path: str) -> bool: ...

    def committed_content(self, relative_path: str) -> Optional[str]: ...


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on any failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except NotADirectoryError:
        raise GitError(f"not a directory: {cwd}")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitError(f"git {args[0]} exited {result.returncode}: {stderr}")
    return result.stdout


class GitAdapter:
    """Answers version-control queries by shelling out to ``git`` in *workspace*.

    Every method raises :class:`GitError` when git cannot answer; mapping those
    failures to safe defaults is the gateway's job.
    """

    def __init__(self, workspace: Path, timeout: int = 30) -> None:
        self.workspace = Path(workspace)
        self.timeout = timeout

    def is_inside_repository(self) -> bool:
        out = _run_git(
            ["rev-parse", "--is-inside-work-tree"], cwd=self.workspace, timeout=self.timeout
        )
        return out.strip() == "true"

    def is_tracked(self, relative_path: str) -> bool:
        # --error-unmatch turns "not tracked" into a non-zero exit
        _run_git(
            ["ls-files", "--error-unmatch", "--", relative_path],
            cwd=self.workspace,
            timeout=self.timeout,
        )
        return True

    def committed_content(self, relative_path: str) -> Optional[str]:
        # "./" makes the path relative to cwd rather than the repository root
        return _run_git(
            ["show", f"HEAD:./{relative_path}"], cwd=self.workspace, timeout=self.timeout
        )
