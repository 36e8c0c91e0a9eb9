"""Line ciphers — capability protocols, AEAD implementation, factory."""

from cipherdiff.cipher.aead import SUPPORTED_ALGORITHMS, AeadCipher
from cipherdiff.cipher.base import CipherError, DecryptionError, LineCipher, LineDecryptor
from cipherdiff.cipher.factory import apply_key_file_encoding, build_cipher, resolve_password

__all__ = [
    "AeadCipher",
    "CipherError",
    "DecryptionError",
    "LineCipher",
    "LineDecryptor",
    "SUPPORTED_ALGORITHMS",
    "apply_key_file_encoding",
    "build_cipher",
    "resolve_password",
]
