"""Build the configured cipher and resolve its password."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

from cipherdiff.cipher.aead import ALGORITHM_AES_GCM, ALGORITHM_CHACHA20_POLY1305, AeadCipher
from cipherdiff.config.loader import ConfigError
from cipherdiff.config.schema import CipherConfig, CipherDiffConfig

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "cipherdiff-default-password"

PASSWORD_ENV_VARS: Dict[str, str] = {
    ALGORITHM_AES_GCM: "CIPHERDIFF_AESGCM_PASSWORD",
    ALGORITHM_CHACHA20_POLY1305: "CIPHERDIFF_CHACHA20POLY1305_PASSWORD",
}


def _read_key_file(path: Path) -> Dict[str, Any]:
    """Parse a JSON or YAML key file. Unreadable files yield an empty mapping."""
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to read key file %s, using defaults: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Key file %s does not contain a mapping, using defaults", path)
        return {}
    return data


def resolve_password(cfg: CipherConfig) -> str:
    """Return the password from the environment or the key file.

    Falls back to a built-in default (with a warning) when none is set.
    """
    if cfg.use_env:
        env_var = PASSWORD_ENV_VARS[cfg.algorithm]
        password = os.environ.get(env_var)
        source = f"ENV::{env_var}"
    else:
        if not cfg.key_file:
            raise ConfigError("cipher.key_file is required when cipher.use_env is false")
        data = _read_key_file(Path(cfg.key_file).expanduser())
        password = data.get("password")
        source = f"{cfg.key_file}::password"

    if not password:
        logger.warning("%s is empty, using the built-in default password", source)
        return DEFAULT_PASSWORD
    return str(password)


def build_cipher(cfg: CipherConfig) -> AeadCipher:
    """Create the cipher selected by *cfg*."""
    if cfg.algorithm not in PASSWORD_ENV_VARS:
        raise ConfigError(f"Algorithm not supported: {cfg.algorithm}")
    return AeadCipher(
        resolve_password(cfg),
        cfg.algorithm,
        kdf_iterations=cfg.kdf_iterations,
    )


def apply_key_file_encoding(cfg: CipherDiffConfig) -> None:
    """Let the key file's ``text_encoding`` (or ``textEncoding``) set ``files.encoding``.

    Only applies when the password comes from the key file. An explicit
    ``CIPHERDIFF_ENCODING`` still wins.
    """
    if cfg.cipher.use_env or not cfg.cipher.key_file or os.environ.get("CIPHERDIFF_ENCODING"):
        return
    data = _read_key_file(Path(cfg.cipher.key_file).expanduser())
    encoding = data.get("text_encoding") or data.get("textEncoding")
    if not encoding:
        return
    if not isinstance(encoding, str):
        raise ConfigError(f"{cfg.cipher.key_file}: text_encoding must be a string")
    logger.debug("Using text encoding %s from %s", encoding, cfg.cipher.key_file)
    cfg.files.encoding = encoding
