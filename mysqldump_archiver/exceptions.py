"""
Exception types for MySQL Dump Archiver.
"""

from typing import Optional


class DumpError(Exception):
    """Base class for all dump failures."""


class ValidationError(DumpError, ValueError):
    """Raised when the dump options are malformed or contradictory."""


class FilesystemPreconditionError(DumpError):
    """Raised when a path the dump depends on does not exist."""


class ExecutionError(DumpError):
    """Raised when the dump pipeline exits non-zero or cannot be started."""

    def __init__(self, stderr: str, returncode: Optional[int] = None):
        super().__init__(stderr)
        self.stderr = stderr
        self.returncode = returncode
