"""
MySQL Dump Archiver
===================
Builds and runs a single mysqldump pipeline per database:
- DEFINER clauses stripped from the output
- Schema-only or data-only dumps
- Selected and ignored tables
- Optional archiving via a command template (pbzip2 by default)
"""

from .command import build_command
from .config import ConfigLoader
from .connection import DatabaseConnection
from .dumper import MysqlDump
from .exceptions import (
    DumpError,
    ExecutionError,
    FilesystemPreconditionError,
    ValidationError,
)
from .executor import DEFAULT_TIMEOUT, execute_command
from .main import main
from .models import (
    ArchiveTemplate,
    ConnectionParams,
    DumpJob,
    DumpMode,
    DumpOptions,
    JobResult,
    RunStats,
)
from .options import validate_options
from .runner import DumpRunner
from .utils import setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core
    "MysqlDump",
    "build_command",
    "execute_command",
    "validate_options",
    "DEFAULT_TIMEOUT",
    # Configuration and batch runs
    "ConfigLoader",
    "DatabaseConnection",
    "DumpRunner",
    # Models
    "ArchiveTemplate",
    "ConnectionParams",
    "DumpJob",
    "DumpMode",
    "DumpOptions",
    "JobResult",
    "RunStats",
    # Errors
    "DumpError",
    "ExecutionError",
    "FilesystemPreconditionError",
    "ValidationError",
    # Utilities
    "setup_logging",
]
