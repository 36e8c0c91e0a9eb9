"""JSON reporter for scripts and CI."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from cipherdiff.engine.context import EncryptionContext
from cipherdiff.engine.policy import should_re_encrypt_line
from cipherdiff.lines import is_blank
from cipherdiff.pipeline.models import ProcessResult


def to_dict(result: ProcessResult) -> Dict[str, Any]:
    """Convert ProcessResult to a JSON-serialisable dict."""
    files: List[Dict[str, Any]] = []
    for o in result.outcomes:
        files.append({
            "path": o.path,
            "status": o.status.value,
            "reused_lines": o.reused_lines,
            "encrypted_lines": o.encrypted_lines,
            **({"target": o.target} if o.target else {}),
            **({"message": o.message} if o.message else {}),
        })

    return {
        "version": "1.0",
        "operation": result.operation.value,
        "is_git_repo": result.is_git_repo,
        "cancelled": result.cancelled,
        "processed": len(result.processed),
        "skipped": len(result.skipped),
        "failed": len(result.failed),
        "reused_lines": result.reused_lines,
        "files": files,
        "duration_ms": result.duration_ms,
    }


def render(result: ProcessResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)


def context_to_dict(path: str, lines: List[str], context: EncryptionContext) -> Dict[str, Any]:
    """Per-line decisions for *lines*; blank lines are written verbatim and listed apart."""
    blank = [n for n, line in enumerate(lines, 1) if is_blank(line)]
    content = [n for n, line in enumerate(lines, 1) if not is_blank(line)]
    return {
        "path": path,
        "is_git_repo": context.is_git_repo,
        "is_new_file": context.is_new_file,
        "reused_lines": [n for n in content if not should_re_encrypt_line(n, context)],
        "re_encrypt_lines": [n for n in content if should_re_encrypt_line(n, context)],
        "blank_lines": blank,
    }
