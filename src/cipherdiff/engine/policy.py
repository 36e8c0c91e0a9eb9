"""Per-line reuse decisions over an EncryptionContext."""

from __future__ import annotations

from typing import Optional

from cipherdiff.engine.context import EncryptionContext


def should_re_encrypt_line(line_number: int, context: EncryptionContext) -> bool:
    """Return True unless *line_number* (1-based) can keep its committed ciphertext."""
    if not context.is_git_repo or context.is_new_file:
        return True
    return line_number not in context.unchanged_lines


def get_original_encrypted_line(line_number: int, context: EncryptionContext) -> Optional[str]:
    """Return the committed ciphertext for *line_number*, or None if it must be re-encrypted."""
    if should_re_encrypt_line(line_number, context):
        return None
    return context.unchanged_lines[line_number]
