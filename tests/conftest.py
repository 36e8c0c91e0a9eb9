"""Shared test fixtures — fake cipher, fake VCS, temp git repos."""

from __future__ import annotations

import base64
import subprocess
from pathlib import Path
from typing import Dict, Optional

import pytest

from cipherdiff.cipher.aead import AeadCipher
from cipherdiff.cipher.base import DecryptionError
from cipherdiff.git.adapter import GitError


class FakeCipher:
    """Predictable cipher: ``enc(<text>)`` round-trips, anything else fails."""

    def __init__(self) -> None:
        self.decrypt_calls = 0

    def encrypt(self, text: str, encoding: str = "utf-8") -> bytes:
        return f"enc({text})".encode(encoding)

    def decrypt(self, data: bytes, encoding: str = "utf-8") -> str:
        self.decrypt_calls += 1
        text = data.decode(encoding, errors="replace")
        if text.startswith("enc(") and text.endswith(")"):
            return text[4:-1]
        raise DecryptionError("Decryption failed for test")

    def encrypt_bytes(self, data: bytes) -> bytes:
        return b"enc(" + data + b")"

    def decrypt_bytes(self, data: bytes) -> bytes:
        if data.startswith(b"enc(") and data.endswith(b")"):
            return data[4:-1]
        raise DecryptionError("Decryption failed for test")


class FakeVCS:
    """In-memory VersionControl backend with call counters."""

    def __init__(
        self,
        *,
        is_repo: bool = True,
        files: Optional[Dict[str, str]] = None,
        untracked: tuple[str, ...] = (),
    ) -> None:
        self.is_repo = is_repo
        self.files = files or {}
        self.untracked = set(untracked)
        self.repo_checks = 0
        self.tracked_checks = 0

    def is_inside_repository(self) -> bool:
        self.repo_checks += 1
        if not self.is_repo:
            raise GitError("fatal: not a git repository")
        return True

    def is_tracked(self, relative_path: str) -> bool:
        self.tracked_checks += 1
        if relative_path in self.untracked or relative_path not in self.files:
            raise GitError(f"error: pathspec '{relative_path}' did not match any file(s)")
        return True

    def committed_content(self, relative_path: str) -> Optional[str]:
        if relative_path not in self.files:
            raise GitError(f"fatal: path '{relative_path}' does not exist in 'HEAD'")
        return self.files[relative_path]


def enc_line(text: str) -> str:
    """The stored form of *text* under FakeCipher."""
    return base64.b64encode(f"enc({text})".encode()).decode()


@pytest.fixture
def fake_cipher() -> FakeCipher:
    return FakeCipher()


@pytest.fixture
def fast_cipher() -> AeadCipher:
    """A real AES-GCM cipher with a cheap KDF so tests stay quick."""
    return AeadCipher("test-password", "aes-gcm", kdf_iterations=1_000)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep the developer's cipherdiff settings out of the tests."""
    for var in (
        "CIPHERDIFF_ALGORITHM",
        "CIPHERDIFF_ENCODING",
        "CIPHERDIFF_DIFF_AWARE",
        "CIPHERDIFF_AESGCM_PASSWORD",
        "CIPHERDIFF_CHACHA20POLY1305_PASSWORD",
    ):
        monkeypatch.delenv(var, raising=False)


def git(repo: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo, capture_output=True, check=True)


def commit_all(repo: Path, message: str = "update") -> None:
    git(repo, "add", "-A")
    git(repo, "commit", "-m", message)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository for integration tests."""
    subprocess.run(["git", "init", str(tmp_path)], capture_output=True, check=True)
    git(tmp_path, "config", "user.email", "test@test.com")
    git(tmp_path, "config", "user.name", "Test")
    git(tmp_path, "config", "commit.gpgsign", "false")
    readme = tmp_path / "README"
    readme.write_bytes(b"# Test\n")
    commit_all(tmp_path, "init")
    return tmp_path
