"""Encrypt and decrypt files in the workspace.

Text files (by extension) are processed in place, one ciphertext line per
plaintext line. When diff-aware mode is on, lines the diff engine reports
as unchanged keep their committed ciphertext, so ``git diff`` only shows the
lines that really changed. Other files are encrypted whole into ``<name>.enc``.

Decryption is strict about the first non-blank line of a text file: if it
does not decrypt, the password is most likely wrong and the file is left
untouched (WrongPasswordError). Later lines that fail are kept as they are.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from cipherdiff.cipher.base import DecryptionError, LineCipher
from cipherdiff.config.schema import CipherDiffConfig
from cipherdiff.engine.builder import EncryptionContextBuilder
from cipherdiff.engine.context import EncryptionContext
from cipherdiff.engine.policy import get_original_encrypted_line
from cipherdiff.lines import (
    decode_line,
    encode_line,
    first_content_index,
    is_blank,
    join_lines,
    split_lines,
)
from cipherdiff.pipeline.ignore import IgnoreMatcher
from cipherdiff.pipeline.models import FileOutcome, Operation, OutcomeStatus, ProcessResult
from cipherdiff.pipeline.paths import (
    get_target_path,
    is_encrypted_blob,
    is_text_file,
    normalize_encoding,
)

logger = logging.getLogger(__name__)


class ProcessError(Exception):
    """Raised when a single file cannot be processed."""


class WrongPasswordError(ProcessError):
    """Raised when the first content line of a file does not decrypt."""


class FileProcessor:
    """Runs encrypt/decrypt operations for one workspace."""

    def __init__(
        self,
        cipher: LineCipher,
        config: CipherDiffConfig,
        workspace: Union[str, Path],
        builder: Optional[EncryptionContextBuilder] = None,
    ) -> None:
        self.cipher = cipher
        self.config = config
        self.workspace = Path(workspace).resolve()
        self.builder = builder or EncryptionContextBuilder.for_workspace(self.workspace)
        self.encoding, _ = normalize_encoding(config.files.encoding)
        self.ignore = IgnoreMatcher.from_file(self.workspace / config.files.ignore_file)

    # ---- helpers ----

    def _rel(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.workspace).as_posix()
        except ValueError:
            return path.as_posix()

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_bytes().decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise ProcessError(f"{self._rel(path)} is not valid {self.encoding} text") from exc

    def _write_text(self, path: Path, lines: List[str]) -> None:
        path.write_bytes(join_lines(lines).encode(self.encoding))

    def _try_decrypt(self, line: str) -> Optional[str]:
        try:
            return self.cipher.decrypt(decode_line(line), self.encoding)
        except (DecryptionError, ValueError):
            return None

    async def build_context(self, path: Path, content: str) -> EncryptionContext:
        """Diff-engine context for *path*, or a full re-encryption one when disabled."""
        if not self.config.git.diff_aware:
            return EncryptionContext.full_reencryption(is_new_file=True, is_git_repo=False)
        return await self.builder.create_encryption_context(
            path, content, self.cipher, self.encoding
        )

    # ---- text files ----

    def _encrypt_lines(self, lines: List[str], context: EncryptionContext) -> Tuple[List[str], int, int]:
        out: List[str] = []
        reused = fresh = 0
        for number, line in enumerate(lines, 1):
            if is_blank(line):
                out.append(line)
                continue
            original = get_original_encrypted_line(number, context)
            if original is not None:
                out.append(original)
                reused += 1
            else:
                out.append(encode_line(self.cipher.encrypt(line, self.encoding)))
                fresh += 1
        return out, reused, fresh

    async def encrypt_text_file(self, path: Path) -> FileOutcome:
        rel = self._rel(path)
        content = self._read_text(path)
        lines = split_lines(content)

        first = first_content_index(lines)
        if first is None:
            return FileOutcome(rel, Operation.ENCRYPT, OutcomeStatus.SKIPPED, message="no content")
        if self._try_decrypt(lines[first]) is not None:
            return FileOutcome(rel, Operation.ENCRYPT, OutcomeStatus.SKIPPED, message="already encrypted")

        context = await self.build_context(path, content)
        out, reused, fresh = await asyncio.to_thread(self._encrypt_lines, lines, context)
        self._write_text(path, out)
        logger.info("Encrypted %s (%d reused, %d re-encrypted)", rel, reused, fresh)
        return FileOutcome(
            rel, Operation.ENCRYPT, OutcomeStatus.ENCRYPTED,
            reused_lines=reused, encrypted_lines=fresh,
        )

    def _decrypt_lines(self, rel: str, lines: List[str]) -> Tuple[List[str], int, int]:
        first = first_content_index(lines)
        out: List[str] = []
        decrypted = kept = 0
        for idx, line in enumerate(lines):
            if is_blank(line):
                out.append(line)
                continue
            plain = self._try_decrypt(line)
            if plain is None:
                if idx == first:
                    raise WrongPasswordError(
                        f"Failed to decrypt {rel}: first line is not readable (likely wrong password)"
                    )
                out.append(line)
                kept += 1
            else:
                out.append(plain)
                decrypted += 1
        return out, decrypted, kept

    async def decrypt_text_file(self, path: Path) -> FileOutcome:
        rel = self._rel(path)
        lines = split_lines(self._read_text(path))
        if first_content_index(lines) is None:
            return FileOutcome(rel, Operation.DECRYPT, OutcomeStatus.SKIPPED, message="no content")

        out, decrypted, kept = await asyncio.to_thread(self._decrypt_lines, rel, lines)
        self._write_text(path, out)
        if kept:
            logger.warning("%s: %d line(s) could not be decrypted and were kept as-is", rel, kept)
        return FileOutcome(
            rel, Operation.DECRYPT, OutcomeStatus.DECRYPTED,
            encrypted_lines=decrypted,
            message=f"{kept} line(s) left encrypted" if kept else None,
        )

    # ---- binary files ----

    async def encrypt_binary_file(self, path: Path) -> FileOutcome:
        rel = self._rel(path)
        data = path.read_bytes()
        if not data:
            logger.warning("Empty file: %s, skipping encryption", rel)
            return FileOutcome(rel, Operation.ENCRYPT, OutcomeStatus.SKIPPED, message="empty file")

        encrypted = await asyncio.to_thread(self.cipher.encrypt_bytes, data)
        target = get_target_path(path, Operation.ENCRYPT)
        target.write_bytes(encrypted)
        if self.config.files.delete_original:
            path.unlink()
        return FileOutcome(rel, Operation.ENCRYPT, OutcomeStatus.ENCRYPTED, target=self._rel(target))

    async def decrypt_binary_file(self, path: Path) -> FileOutcome:
        rel = self._rel(path)
        try:
            data = await asyncio.to_thread(self.cipher.decrypt_bytes, path.read_bytes())
        except DecryptionError as exc:
            raise WrongPasswordError(f"Failed to decrypt {rel}: {exc}") from exc

        target = get_target_path(path, Operation.DECRYPT)
        target.write_bytes(data)
        if self.config.files.delete_original:
            path.unlink()
        return FileOutcome(rel, Operation.DECRYPT, OutcomeStatus.DECRYPTED, target=self._rel(target))

    # ---- dispatch ----

    async def _dispatch(self, path: Path, operation: Operation) -> FileOutcome:
        text_exts = self.config.files.text_extensions
        if operation == Operation.ENCRYPT:
            if is_encrypted_blob(path):
                return FileOutcome(
                    self._rel(path), operation, OutcomeStatus.SKIPPED, message="already encrypted"
                )
            if is_text_file(path, text_exts):
                return await self.encrypt_text_file(path)
            return await self.encrypt_binary_file(path)

        if is_encrypted_blob(path):
            return await self.decrypt_binary_file(path)
        if is_text_file(path, text_exts):
            return await self.decrypt_text_file(path)
        return FileOutcome(self._rel(path), operation, OutcomeStatus.SKIPPED, message="not encrypted")

    async def process_file(self, path: Union[str, Path], operation: Operation) -> FileOutcome:
        """Process one file; failures are reported in the outcome, not raised."""
        path = Path(path)
        try:
            return await self._dispatch(path, operation)
        except (ProcessError, OSError) as exc:
            logger.error("%s failed for %s: %s", operation.value, self._rel(path), exc)
            return FileOutcome(self._rel(path), operation, OutcomeStatus.FAILED, message=str(exc))

    # ---- traversal ----

    def _ignore_key(self, path: Path, operation: Operation) -> str:
        # An encrypted blob is judged by the name it decrypts to, so the
        # default "**/*.enc" pattern only keeps blobs out of encryption.
        if operation == Operation.DECRYPT and is_encrypted_blob(path):
            path = get_target_path(path, Operation.DECRYPT)
        return self._rel(path)

    def collect_files(self, root: Path, operation: Operation) -> List[Path]:
        """Walk *root* and return the files to process, honouring the ignore file."""
        if root.is_file():
            return [root]

        files: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            dirnames[:] = sorted(
                d for d in dirnames if not self.ignore.is_ignored(self._rel(current / d))
            )
            for name in sorted(filenames):
                path = current / name
                if self.ignore.is_ignored(self._ignore_key(path, operation)):
                    continue
                files.append(path)
        return files

    async def process_path(
        self,
        target: Union[str, Path],
        operation: Operation,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> ProcessResult:
        """Encrypt or decrypt a file or a directory tree.

        Files run concurrently up to ``files.max_concurrency``. Setting
        *cancel* stops files that have not started yet; finished files stay
        finished and no file is ever left half-written by cancellation.
        """
        start = time.perf_counter()
        root = Path(target)
        if not root.is_absolute():
            root = self.workspace / root
        if not root.exists():
            raise ProcessError(f"Path does not exist or cannot be accessed: {target}")

        files = self.collect_files(root, operation)
        semaphore = asyncio.Semaphore(self.config.files.max_concurrency)
        result = ProcessResult(operation=operation)

        async def run(path: Path) -> Optional[FileOutcome]:
            async with semaphore:
                if cancel is not None and cancel.is_set():
                    return None
                return await self.process_file(path, operation)

        outcomes = await asyncio.gather(*(run(p) for p in files))
        result.outcomes = [o for o in outcomes if o is not None]
        result.cancelled = len(result.outcomes) < len(files)
        result.is_git_repo = self.builder.get_is_git_repository()
        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return result
