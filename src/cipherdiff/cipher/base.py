"""Cipher capability protocols and errors."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


class CipherError(Exception):
    """Base class for cipher failures."""


class DecryptionError(CipherError):
    """Raised when ciphertext fails authentication, is malformed, or the key is wrong."""


@runtime_checkable
class LineDecryptor(Protocol):
    """The only capability the diff engine needs from a cipher."""

    def decrypt(self, data: bytes, encoding: str = "utf-8") -> str:
        """Decrypt one line. Raises DecryptionError on any failure."""
        ...


@runtime_checkable
class LineCipher(LineDecryptor, Protocol):
    """Full cipher used by the encryption pipeline."""

    def encrypt(self, text: str, encoding: str = "utf-8") -> bytes: ...

    def encrypt_bytes(self, data: bytes) -> bytes: ...

    def decrypt_bytes(self, data: bytes) -> bytes: ...
