"""Result models for file processing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Operation(str, Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class OutcomeStatus(str, Enum):
    ENCRYPTED = "encrypted"
    DECRYPTED = "decrypted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class FileOutcome:
    """What happened to a single file."""

    path: str
    operation: Operation
    status: OutcomeStatus
    reused_lines: int = 0  # committed ciphertext written back verbatim
    encrypted_lines: int = 0  # freshly encrypted (or decrypted) lines
    target: Optional[str] = None  # set when the output lands in another file
    message: Optional[str] = None


@dataclass
class ProcessResult:
    """Complete result of an encrypt/decrypt run."""

    operation: Operation
    outcomes: List[FileOutcome] = field(default_factory=list)
    is_git_repo: bool = False
    cancelled: bool = False
    duration_ms: float = 0.0

    def _with_status(self, status: OutcomeStatus) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def processed(self) -> List[FileOutcome]:
        return [
            o for o in self.outcomes
            if o.status in (OutcomeStatus.ENCRYPTED, OutcomeStatus.DECRYPTED)
        ]

    @property
    def skipped(self) -> List[FileOutcome]:
        return self._with_status(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> List[FileOutcome]:
        return self._with_status(OutcomeStatus.FAILED)

    @property
    def reused_lines(self) -> int:
        return sum(o.reused_lines for o in self.outcomes)

    @property
    def encrypted_lines(self) -> int:
        return sum(o.encrypted_lines for o in self.outcomes)

    @property
    def ok(self) -> bool:
        return not self.failed and not self.cancelled
