"""Tests for ignore-file matching."""

from pathlib import Path

from cipherdiff.pipeline.ignore import IgnoreMatcher


class TestPatterns:
    def test_directory_glob(self):
        m = IgnoreMatcher(["node_modules/**"])
        assert m.is_ignored("node_modules")
        assert m.is_ignored("node_modules/pkg/index.js")
        assert not m.is_ignored("src/node_modules_notes.txt")

    def test_any_depth_glob(self):
        m = IgnoreMatcher(["**/*.enc"])
        assert m.is_ignored("photo.png.enc")
        assert m.is_ignored("a/b/photo.png.enc")
        assert not m.is_ignored("a/b/photo.png")

    def test_plain_glob(self):
        m = IgnoreMatcher(["*.log", "build/*.txt"])
        assert m.is_ignored("debug.log")
        assert m.is_ignored("logs/debug.log")
        assert m.is_ignored("build/out.txt")
        assert not m.is_ignored("src/out.txt")

    def test_plain_name(self):
        m = IgnoreMatcher(["secrets", "vendor/"])
        assert m.is_ignored("secrets")
        assert m.is_ignored("secrets/key.txt")
        assert m.is_ignored("config/secrets")
        assert m.is_ignored("vendor/lib.txt")
        assert not m.is_ignored("secrets.txt")

    def test_root_is_never_ignored(self):
        assert not IgnoreMatcher(["*"]).is_ignored(".")

    def test_config_file_always_ignored(self):
        assert IgnoreMatcher([]).is_ignored(".cipherdiff.toml")
        assert IgnoreMatcher([]).is_ignored("nested/.cipherdiff.toml")


class TestIgnoreFile:
    def test_defaults_when_missing(self, tmp_path: Path):
        m = IgnoreMatcher.from_file(tmp_path / ".cipherdiff-ignore")
        assert m.is_ignored(".git/config")
        assert m.is_ignored(".vscode/settings.json")
        assert m.is_ignored("photo.png.enc")
        assert not m.is_ignored("notes.txt")

    def test_reads_patterns_and_comments(self, tmp_path: Path):
        ignore = tmp_path / ".cipherdiff-ignore"
        ignore.write_text("# keep docs readable\ndocs/**\n\n*.csv\n")
        m = IgnoreMatcher.from_file(ignore)
        assert m.patterns == ["docs/**", "*.csv"]
        assert m.is_ignored("docs/guide.md")
        assert m.is_ignored("data.csv")
        assert not m.is_ignored("photo.png.enc")

    def test_ignore_file_itself_is_skipped(self, tmp_path: Path):
        ignore = tmp_path / ".cipherdiff-ignore"
        ignore.write_text("docs/**\n")
        assert IgnoreMatcher.from_file(ignore).is_ignored(".cipherdiff-ignore")
