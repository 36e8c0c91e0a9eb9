"""Starter .cipherdiff.toml and ignore-file templates."""

CONFIG_FILENAME = ".cipherdiff.toml"

DEFAULT_TOML = """\
# cipherdiff configuration
version = "1.0"

[cipher]
algorithm = "aes-gcm"       # aes-gcm | chacha20-poly1305
use_env = true              # password from CIPHERDIFF_AESGCM_PASSWORD / CIPHERDIFF_CHACHA20POLY1305_PASSWORD
# key_file = "~/.config/cipherdiff/key.yaml"   # used when use_env = false; needs a "password" entry
# kdf_iterations = 100000

[files]
# text_extensions = [".txt", ".md", ".json", ".yaml", ".yml", ".toml", ".ini", ".env"]
ignore_file = ".cipherdiff-ignore"
delete_original = true      # binary files: remove the source after writing <name>.enc
encoding = "utf-8"
# max_concurrency = 4

[git]
diff_aware = true           # keep committed ciphertext for unchanged lines
"""

DEFAULT_IGNORE_PATTERNS = [
    "node_modules/**",
    ".git/**",
    "**/*.enc",
    ".vscode/**",
]
