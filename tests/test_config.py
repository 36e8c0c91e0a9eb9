"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from cipherdiff.config.defaults import DEFAULT_TOML
from cipherdiff.config.loader import ConfigError, load_config
from cipherdiff.config.schema import DEFAULT_TEXT_EXTENSIONS


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.cipher.algorithm == "aes-gcm"
        assert cfg.cipher.use_env is True
        assert cfg.files.encoding == "utf-8"
        assert cfg.files.text_extensions == DEFAULT_TEXT_EXTENSIONS
        assert cfg.git.diff_aware is True

    def test_starter_template_loads(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text(DEFAULT_TOML)
        cfg = load_config(tmp_path)
        assert cfg.cipher.algorithm == "aes-gcm"
        assert cfg.files.ignore_file == ".cipherdiff-ignore"

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text(
            'version = "1.0"\n'
            '[cipher]\n'
            'algorithm = "chacha20-poly1305"\n'
            'kdf_iterations = 5000\n'
            '[files]\n'
            'text_extensions = ["TXT", ".Conf"]\n'
            'delete_original = false\n'
            '[git]\n'
            'diff_aware = false\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.cipher.algorithm == "chacha20-poly1305"
        assert cfg.cipher.kdf_iterations == 5000
        assert cfg.files.text_extensions == [".txt", ".conf"]
        assert cfg.files.delete_original is False
        assert cfg.git.diff_aware is False

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text('[files]\nencoding = "latin-1"\ncolour = "blue"\n')
        cfg = load_config(tmp_path)
        assert cfg.files.encoding == "latin-1"

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[cipher]\nalgorithm = "chacha20-poly1305"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.cipher.algorithm == "chacha20-poly1305"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text('cipher = "aes-gcm"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            load_config(tmp_path)


class TestValidation:
    def test_unsupported_algorithm(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text('[cipher]\nalgorithm = "des"\n')
        with pytest.raises(ConfigError, match="Unsupported algorithm"):
            load_config(tmp_path)

    def test_non_positive_iterations(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text("[cipher]\nkdf_iterations = 0\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_non_positive_concurrency(self, tmp_path: Path):
        (tmp_path / ".cipherdiff.toml").write_text("[files]\nmax_concurrency = 0\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    @pytest.mark.parametrize(
        "toml",
        [
            '[cipher]\nkdf_iterations = "many"\n',
            "[cipher]\nkdf_iterations = true\n",
            '[cipher]\nuse_env = "yes"\n',
            "[cipher]\nalgorithm = 1\n",
            '[files]\nmax_concurrency = "4"\n',
            '[files]\ntext_extensions = ".txt"\n',
            "[files]\ntext_extensions = [1, 2]\n",
            "[files]\nencoding = 8\n",
            '[git]\ndiff_aware = "no"\n',
        ],
    )
    def test_wrong_value_type(self, tmp_path: Path, toml: str):
        (tmp_path / ".cipherdiff.toml").write_text(toml)
        with pytest.raises(ConfigError, match="must be of type"):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_algorithm_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CIPHERDIFF_ALGORITHM", "ChaCha20-Poly1305")
        cfg = load_config(tmp_path)
        assert cfg.cipher.algorithm == "chacha20-poly1305"

    def test_encoding_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CIPHERDIFF_ENCODING", "latin-1")
        cfg = load_config(tmp_path)
        assert cfg.files.encoding == "latin-1"

    @pytest.mark.parametrize("value,expected", [("0", False), ("off", False), ("yes", True)])
    def test_diff_aware_override(self, tmp_path: Path, monkeypatch, value, expected):
        monkeypatch.setenv("CIPHERDIFF_DIFF_AWARE", value)
        cfg = load_config(tmp_path)
        assert cfg.git.diff_aware is expected

    def test_invalid_diff_aware_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CIPHERDIFF_DIFF_AWARE", "maybe")
        cfg = load_config(tmp_path)
        assert cfg.git.diff_aware is True  # default unchanged

    def test_invalid_algorithm_env_rejected(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CIPHERDIFF_ALGORITHM", "rot13")
        with pytest.raises(ConfigError):
            load_config(tmp_path)
