"""Build the EncryptionContext for one file.

Pipeline: repository check → tracked check → committed baseline → per-line
decryption → alignment with the current content → map of reusable
ciphertext lines. Every failure along the way degrades to "re-encrypt more",
never to an error: an unreadable baseline line is replaced by a unique
sentinel so it cannot match anything.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections import defaultdict, deque
from pathlib import Path
from typing import Deque, Dict, List, Sequence, Union

from cipherdiff.cipher.base import DecryptionError, LineDecryptor
from cipherdiff.engine.aligner import Alignment, align
from cipherdiff.engine.context import EncryptionContext
from cipherdiff.git.gateway import VersionControlGateway
from cipherdiff.lines import decode_line, is_blank, split_lines

logger = logging.getLogger(__name__)

SENTINEL_PREFIX = "\x00cipherdiff:undecryptable:"


def make_sentinel() -> str:
    """Return a fresh placeholder that equals no real line and no other sentinel."""
    return f"{SENTINEL_PREFIX}{uuid.uuid4().hex}"


def is_sentinel(line: str) -> bool:
    return line.startswith(SENTINEL_PREFIX)


def relocate_moved_lines(
    baseline: Sequence[str], candidate: Sequence[str], pairs: Alignment
) -> Alignment:
    """Pair lines the LCS left unmatched because they moved.

    Each unmatched non-blank candidate line, in order, takes the earliest
    unmatched baseline line with the same text. Returns only the new pairs.
    """
    matched_baseline = {i for i, _ in pairs}
    matched_candidate = {j for _, j in pairs}

    free: Dict[str, Deque[int]] = defaultdict(deque)
    for i, line in enumerate(baseline):
        if i not in matched_baseline and not is_blank(line):
            free[line].append(i)

    moved: Alignment = []
    for j, line in enumerate(candidate):
        if j in matched_candidate or is_blank(line):
            continue
        slots = free.get(line)
        if slots:
            moved.append((slots.popleft(), j))
    return moved


class EncryptionContextBuilder:
    """Creates one EncryptionContext per file per operation.

    Holds the workspace's gateway, so the repository check is shared by every
    file processed through the same builder.
    """

    def __init__(self, gateway: VersionControlGateway) -> None:
        self.gateway = gateway

    @classmethod
    def for_workspace(cls, workspace: Union[str, Path]) -> "EncryptionContextBuilder":
        return cls(VersionControlGateway(workspace))

    def get_is_git_repository(self) -> bool:
        return self.gateway.get_is_git_repository()

    async def decrypt_baseline(
        self, lines: Sequence[str], cipher: LineDecryptor, encoding: str = "utf-8"
    ) -> List[str]:
        """Decrypt committed lines independently; results are stored by index."""
        decrypted: List[str] = [""] * len(lines)
        failures = 0

        async def decrypt_at(idx: int, line: str) -> None:
            nonlocal failures
            if is_blank(line):
                return
            try:
                data = decode_line(line)
                decrypted[idx] = await asyncio.to_thread(cipher.decrypt, data, encoding)
            except (DecryptionError, ValueError):
                # binascii.Error and UnicodeDecodeError are ValueErrors too
                failures += 1
                decrypted[idx] = make_sentinel()

        await asyncio.gather(*(decrypt_at(i, line) for i, line in enumerate(lines)))
        if failures:
            logger.debug("%d of %d baseline lines could not be decrypted", failures, len(lines))
        return decrypted

    async def create_encryption_context(
        self,
        file_path: Union[str, Path],
        current_content: str,
        cipher: LineDecryptor,
        encoding: str = "utf-8",
    ) -> EncryptionContext:
        is_git_repo = await self.gateway.detect_repository()
        if not is_git_repo:
            return EncryptionContext.full_reencryption(is_new_file=True, is_git_repo=False)

        status = await self.gateway.get_tracking_status(file_path)
        if status.is_new_file:
            return EncryptionContext.full_reencryption(is_new_file=True, is_git_repo=True)

        committed = await self.gateway.fetch_committed_content(file_path)
        if not committed:
            return EncryptionContext.full_reencryption(is_new_file=True, is_git_repo=True)

        baseline = await self.decrypt_baseline(committed, cipher, encoding)
        current = split_lines(current_content)

        pairs = align(baseline, current)
        pairs.extend(relocate_moved_lines(baseline, current, pairs))

        unchanged = {j + 1: committed[i] for i, j in pairs}
        logger.debug(
            "%s: %d of %d lines reuse committed ciphertext",
            file_path, len(unchanged), len(current),
        )
        return EncryptionContext(is_new_file=False, is_git_repo=True, unchanged_lines=unchanged)
