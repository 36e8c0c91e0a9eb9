"""AEAD line cipher: AES-256-GCM or ChaCha20-Poly1305 over a password-derived key.

Blob layout::

    salt (16) | nonce (12) | tag (16) | ciphertext

The key is derived with PBKDF2-HMAC-SHA256 from the password and the salt
stored in the blob. One instance encrypts everything under a single random
salt, so derived keys are cached per salt and a file's lines cost one
derivation, not one per line.
"""

from __future__ import annotations

import threading
from typing import Dict, Final

from Crypto.Cipher import AES, ChaCha20_Poly1305
from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import PBKDF2
from Crypto.Random import get_random_bytes

from cipherdiff.cipher.base import CipherError, DecryptionError

ALGORITHM_AES_GCM: Final[str] = "aes-gcm"
ALGORITHM_CHACHA20_POLY1305: Final[str] = "chacha20-poly1305"
SUPPORTED_ALGORITHMS: Final[tuple[str, ...]] = (ALGORITHM_AES_GCM, ALGORITHM_CHACHA20_POLY1305)

SALT_SIZE: Final[int] = 16
NONCE_SIZE: Final[int] = 12
TAG_SIZE: Final[int] = 16
KEY_SIZE: Final[int] = 32
DEFAULT_KDF_ITERATIONS: Final[int] = 100_000

_HEADER_SIZE = SALT_SIZE + NONCE_SIZE + TAG_SIZE


class AeadCipher:
    """Password-based authenticated cipher for single lines and whole files."""

    def __init__(
        self,
        password: str,
        algorithm: str = ALGORITHM_AES_GCM,
        *,
        kdf_iterations: int = DEFAULT_KDF_ITERATIONS,
    ) -> None:
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise CipherError(f"Algorithm not supported: {algorithm}")
        if not password:
            raise CipherError("Password must not be empty")
        self.algorithm = algorithm
        self._password = password.encode("utf-8")
        self._iterations = kdf_iterations
        self._salt = get_random_bytes(SALT_SIZE)
        self._keys: Dict[bytes, bytes] = {}
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"AeadCipher(algorithm={self.algorithm!r})"

    # ---- key handling ----

    def _key_for(self, salt: bytes) -> bytes:
        with self._lock:
            key = self._keys.get(salt)
            if key is None:
                key = PBKDF2(
                    self._password,
                    salt,
                    dkLen=KEY_SIZE,
                    count=self._iterations,
                    hmac_hash_module=SHA256,
                )
                self._keys[salt] = key
            return key

    def _new(self, key: bytes, nonce: bytes):
        if self.algorithm == ALGORITHM_AES_GCM:
            return AES.new(key, AES.MODE_GCM, nonce=nonce)
        return ChaCha20_Poly1305.new(key=key, nonce=nonce)

    # ---- bytes ----

    def encrypt_bytes(self, data: bytes) -> bytes:
        nonce = get_random_bytes(NONCE_SIZE)
        engine = self._new(self._key_for(self._salt), nonce)
        ciphertext, tag = engine.encrypt_and_digest(data)
        return self._salt + nonce + tag + ciphertext

    def decrypt_bytes(self, data: bytes) -> bytes:
        if len(data) < _HEADER_SIZE:
            raise DecryptionError("Ciphertext is too short")
        salt = data[:SALT_SIZE]
        nonce = data[SALT_SIZE:SALT_SIZE + NONCE_SIZE]
        tag = data[SALT_SIZE + NONCE_SIZE:_HEADER_SIZE]
        ciphertext = data[_HEADER_SIZE:]
        engine = self._new(self._key_for(salt), nonce)
        try:
            return engine.decrypt_and_verify(ciphertext, tag)
        except ValueError as exc:
            raise DecryptionError("Authentication failed (wrong password or corrupted data)") from exc

    # ---- text ----

    def encrypt(self, text: str, encoding: str = "utf-8") -> bytes:
        return self.encrypt_bytes(text.encode(encoding))

    def decrypt(self, data: bytes, encoding: str = "utf-8") -> str:
        plaintext = self.decrypt_bytes(data)
        try:
            return plaintext.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise DecryptionError(f"Decrypted data is not valid {encoding}") from exc
