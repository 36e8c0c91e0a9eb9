"""Ignore-file support for workspace traversal.

Format (one pattern per line, ``#`` starts a comment):
  - ``dir/**`` ignores the directory and everything below it.
  - ``**/*.ext`` matches at any depth, including the workspace root.
  - Other glob patterns are matched against the relative path and the basename.
  - Plain names match a path, anything below it, or a basename.

When the ignore file does not exist, a default set is used.
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

from cipherdiff.config.defaults import CONFIG_FILENAME, DEFAULT_IGNORE_PATTERNS

_GLOB_CHARS = frozenset("*?[")


def _has_glob(pattern: str) -> bool:
    return any(c in _GLOB_CHARS for c in pattern)


class IgnoreMatcher:
    """Evaluate workspace-relative posix paths against ignore patterns."""

    def __init__(self, patterns: Optional[Iterable[str]] = None) -> None:
        self.patterns: List[str] = [p.strip() for p in (patterns or []) if p.strip()]
        # Never encrypt our own config or ignore file.
        self._always: List[str] = [CONFIG_FILENAME]

    @classmethod
    def from_file(cls, path: Path) -> "IgnoreMatcher":
        """Load an ignore file, falling back to the default patterns."""
        if not path.is_file():
            instance = cls(DEFAULT_IGNORE_PATTERNS)
        else:
            patterns: List[str] = []
            with open(path, encoding="utf-8") as f:
                for raw in f:
                    line = raw.strip()
                    if not line or line.startswith("#"):
                        continue
                    patterns.append(line)
            instance = cls(patterns)
        instance._always.append(path.name)
        return instance

    def is_ignored(self, rel_path: str) -> bool:
        """Return True if *rel_path* (workspace-relative, posix) should be skipped."""
        rel = rel_path.strip("/")
        if not rel or rel == ".":
            return False
        name = PurePosixPath(rel).name
        if name in self._always:
            return True
        return any(self._matches(rel, name, pat) for pat in self.patterns)

    @staticmethod
    def _matches(rel: str, name: str, pattern: str) -> bool:
        if pattern.endswith("/**"):
            prefix = pattern[:-3].strip("/")
            return rel == prefix or rel.startswith(prefix + "/")
        if pattern.startswith("**/"):
            tail = pattern[3:]
            return fnmatch(name, tail) or fnmatch(rel, tail) or fnmatch(rel, pattern)
        if _has_glob(pattern):
            return fnmatch(rel, pattern) or fnmatch(name, pattern)
        plain = pattern.strip("/")
        return rel == plain or rel.startswith(plain + "/") or name == plain
