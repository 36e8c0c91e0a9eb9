"""The per-file re-encryption decision artifact."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional


def _frozen(mapping: Optional[Mapping[int, str]]) -> Mapping[int, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class EncryptionContext:
    """Result of comparing a file's committed ciphertext with its current plaintext.

    ``unchanged_lines`` maps 1-based line numbers of the *current* content to
    the committed ciphertext line that may be written back verbatim. It is
    read-only and always empty when ``is_git_repo`` is false or
    ``is_new_file`` is true.
    """

    is_new_file: bool
    is_git_repo: bool
    unchanged_lines: Mapping[int, str] = field(default_factory=lambda: _frozen(None))

    def __post_init__(self) -> None:
        lines = {} if (not self.is_git_repo or self.is_new_file) else self.unchanged_lines
        object.__setattr__(self, "unchanged_lines", _frozen(lines))

    @classmethod
    def full_reencryption(cls, *, is_new_file: bool, is_git_repo: bool) -> "EncryptionContext":
        return cls(is_new_file=is_new_file, is_git_repo=is_git_repo)

    @property
    def reused_count(self) -> int:
        return len(self.unchanged_lines)
