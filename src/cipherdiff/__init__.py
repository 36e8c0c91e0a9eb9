"""cipherdiff — line-level encryption that keeps git diffs meaningful."""

__version__ = "0.1.0"
