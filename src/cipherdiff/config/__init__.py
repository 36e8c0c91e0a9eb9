"""Configuration loading, schema, and defaults."""

from cipherdiff.config.loader import ConfigError, load_config
from cipherdiff.config.schema import CipherConfig, CipherDiffConfig, FilesConfig, GitConfig

__all__ = [
    "CipherConfig",
    "CipherDiffConfig",
    "ConfigError",
    "FilesConfig",
    "GitConfig",
    "load_config",
]
