"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

Algorithm = Literal["aes-gcm", "chacha20-poly1305"]

DEFAULT_TEXT_EXTENSIONS: List[str] = [
    ".txt",
    ".md",
    ".json",
    ".yaml",
    ".yml",
    ".toml",
    ".ini",
    ".env",
    ".csv",
    ".xml",
]


@dataclass
class CipherConfig:
    algorithm: Algorithm = "aes-gcm"
    use_env: bool = True  # read the password from the environment
    key_file: Optional[str] = None  # JSON/YAML with "password" when use_env is false
    kdf_iterations: int = 100_000


@dataclass
class FilesConfig:
    text_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_TEXT_EXTENSIONS))
    ignore_file: str = ".cipherdiff-ignore"
    delete_original: bool = True  # remove the source after binary encrypt/decrypt
    encoding: str = "utf-8"
    max_concurrency: int = 4


@dataclass
class GitConfig:
    diff_aware: bool = True  # reuse committed ciphertext for unchanged lines


@dataclass
class CipherDiffConfig:
    version: str = "1.0"
    cipher: CipherConfig = field(default_factory=CipherConfig)
    files: FilesConfig = field(default_factory=FilesConfig)
    git: GitConfig = field(default_factory=GitConfig)
