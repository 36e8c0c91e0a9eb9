"""Line protocol shared by the diff engine and the encryption pipeline.

Wire format: every non-blank plaintext line is encrypted on its own and
stored as one base64 line. Blank lines are written verbatim and never reach
the cipher. Both LF and CRLF are accepted on input; output always uses LF.
"""

from __future__ import annotations

import base64
import re
from typing import Iterable, List, Optional

_LINE_SPLIT_RE = re.compile(r"\r?\n")


def split_lines(text: str) -> List[str]:
    """Split *text* on LF or CRLF.

    A trailing newline yields a trailing empty line, so ``join_lines`` restores
    the text exactly (modulo CRLF → LF).
    """
    return _LINE_SPLIT_RE.split(text)


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)


def is_blank(line: str) -> bool:
    """Blank lines are preserved verbatim and never encrypted."""
    return line.strip() == ""


def encode_line(ciphertext: bytes) -> str:
    """Render one encrypted line for storage in a text file."""
    return base64.b64encode(ciphertext).decode("ascii")


def decode_line(line: str) -> bytes:
    """Parse a stored line back into ciphertext bytes.

    Raises:
        binascii.Error: if *line* is not valid base64.
    """
    return base64.b64decode(line.strip(), validate=True)


def first_content_index(lines: List[str]) -> Optional[int]:
    """Return the index of the first non-blank line, or None."""
    for idx, line in enumerate(lines):
        if not is_blank(line):
            return idx
    return None
