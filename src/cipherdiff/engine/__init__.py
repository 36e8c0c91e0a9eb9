"""Diff engine — LCS alignment, context building, re-encryption policy."""

from cipherdiff.engine.aligner import align
from cipherdiff.engine.builder import EncryptionContextBuilder, make_sentinel
from cipherdiff.engine.context import EncryptionContext
from cipherdiff.engine.policy import get_original_encrypted_line, should_re_encrypt_line

__all__ = [
    "EncryptionContext",
    "EncryptionContextBuilder",
    "align",
    "get_original_encrypted_line",
    "make_sentinel",
    "should_re_encrypt_line",
]
