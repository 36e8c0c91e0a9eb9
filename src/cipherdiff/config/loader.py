"""Load and merge configuration from .cipherdiff.toml, CLI flags, and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from cipherdiff.config.defaults import CONFIG_FILENAME
from cipherdiff.config.schema import CipherConfig, CipherDiffConfig, FilesConfig, GitConfig

_ALGORITHMS = ("aes-gcm", "chacha20-poly1305")
_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(workspace: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = workspace / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _merge_env_overrides(cfg: CipherDiffConfig) -> None:
    """Apply CIPHERDIFF_* environment variable overrides."""
    if val := os.environ.get("CIPHERDIFF_ALGORITHM"):
        cfg.cipher.algorithm = val.strip().lower()  # type: ignore[assignment]
    if val := os.environ.get("CIPHERDIFF_ENCODING"):
        cfg.files.encoding = val.strip()
    if val := os.environ.get("CIPHERDIFF_DIFF_AWARE"):
        lowered = val.strip().lower()
        if lowered in _TRUTHY:
            cfg.git.diff_aware = True
        elif lowered in _FALSY:
            cfg.git.diff_aware = False


def _expect(value: Any, kind: type, name: str) -> None:
    # bool is an int subclass; reject it where a number is expected
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(f"{name} must be of type {kind.__name__}, got {value!r}")


def _validate(cfg: CipherDiffConfig) -> None:
    _expect(cfg.cipher.algorithm, str, "cipher.algorithm")
    _expect(cfg.cipher.use_env, bool, "cipher.use_env")
    if cfg.cipher.key_file is not None:
        _expect(cfg.cipher.key_file, str, "cipher.key_file")
    _expect(cfg.cipher.kdf_iterations, int, "cipher.kdf_iterations")
    _expect(cfg.files.text_extensions, list, "files.text_extensions")
    for ext in cfg.files.text_extensions:
        _expect(ext, str, "files.text_extensions[]")
    _expect(cfg.files.ignore_file, str, "files.ignore_file")
    _expect(cfg.files.delete_original, bool, "files.delete_original")
    _expect(cfg.files.encoding, str, "files.encoding")
    _expect(cfg.files.max_concurrency, int, "files.max_concurrency")
    _expect(cfg.git.diff_aware, bool, "git.diff_aware")

    if cfg.cipher.algorithm not in _ALGORITHMS:
        raise ConfigError(
            f"Unsupported algorithm '{cfg.cipher.algorithm}' "
            f"(expected one of: {', '.join(_ALGORITHMS)})"
        )
    if cfg.cipher.kdf_iterations < 1:
        raise ConfigError("cipher.kdf_iterations must be positive")
    if cfg.files.max_concurrency < 1:
        raise ConfigError("files.max_concurrency must be positive")
    cfg.files.text_extensions = [
        ext.lower() if ext.startswith(".") else f".{ext.lower()}"
        for ext in cfg.files.text_extensions
    ]


def load_config(
    workspace: Path,
    config_override: Optional[str] = None,
) -> CipherDiffConfig:
    """Load, validate, and return a CipherDiffConfig."""
    config_path = find_config_file(workspace, config_override)

    if config_path is None:
        cfg = CipherDiffConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = CipherDiffConfig(
                version=raw.get("version", "1.0"),
                cipher=_build_section(raw, CipherConfig, "cipher"),
                files=_build_section(raw, FilesConfig, "files"),
                git=_build_section(raw, GitConfig, "git"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid value in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
