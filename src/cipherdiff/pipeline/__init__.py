"""File processing pipeline — traversal, ignore rules, line encryption."""

from cipherdiff.pipeline.ignore import IgnoreMatcher
from cipherdiff.pipeline.models import FileOutcome, Operation, OutcomeStatus, ProcessResult
from cipherdiff.pipeline.processor import FileProcessor, ProcessError, WrongPasswordError

__all__ = [
    "FileOutcome",
    "FileProcessor",
    "IgnoreMatcher",
    "Operation",
    "OutcomeStatus",
    "ProcessError",
    "ProcessResult",
    "WrongPasswordError",
]
