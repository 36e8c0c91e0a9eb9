"""Path and encoding helpers for the processing pipeline."""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

from cipherdiff.pipeline.models import Operation

logger = logging.getLogger(__name__)

ENCRYPTED_SUFFIX = ".enc"


def is_text_file(path: Path, text_extensions: Iterable[str]) -> bool:
    """Text files are encrypted line by line; everything else as a whole blob.

    Dotfiles such as ``.env`` have no suffix, so the bare name is checked too.
    """
    extensions = {e.lower() for e in text_extensions}
    return path.suffix.lower() in extensions or path.name.lower() in extensions


def is_encrypted_blob(path: Path) -> bool:
    return path.name.endswith(ENCRYPTED_SUFFIX)


def get_target_path(path: Path, operation: Operation) -> Path:
    """``x`` → ``x.enc`` on encrypt, ``x.enc`` → ``x`` on decrypt; otherwise unchanged."""
    name = path.name
    if operation == Operation.ENCRYPT and not name.endswith(ENCRYPTED_SUFFIX):
        return path.with_name(name + ENCRYPTED_SUFFIX)
    if operation == Operation.DECRYPT and name.endswith(ENCRYPTED_SUFFIX):
        return path.with_name(name[: -len(ENCRYPTED_SUFFIX)])
    return path


def normalize_encoding(name: Optional[str]) -> Tuple[str, bool]:
    """Map a user-supplied encoding name to a Python codec.

    Returns ``(codec_name, supported)``. Unknown names fall back to UTF-8.
    """
    if not name:
        return "utf-8", True
    try:
        return codecs.lookup(name).name, True
    except LookupError:
        logger.warning("Encoding '%s' is not supported, using utf-8 instead", name)
        return "utf-8", False
