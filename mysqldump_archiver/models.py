"""
Data models and enums for MySQL Dump Archiver.
"""

import shlex
from dataclasses import dataclass, field
from enum import Enum
from string import Template
from typing import Any, ClassVar, Optional

from .exceptions import ValidationError


class DumpMode(Enum):
    """Restricts a dump to the schema or to the data only."""
    SCHEMA = "schema"
    DATA = "data"

    @property
    def flags(self) -> str:
        if self is DumpMode.SCHEMA:
            return "--no-data"
        return "--no-create-info --no-create-db --skip-triggers --skip-routines"


class ArchiveTemplate:
    """
    Shell command pattern with a `$source` and a `$destination` slot.

    Both values are shell-escaped before substitution. The pattern itself is
    trusted and inserted as-is.
    """

    SLOTS = frozenset({'source', 'destination'})

    def __init__(self, pattern: str):
        self.pattern = pattern
        self._template = Template(pattern)
        self._check_placeholders()

    def _check_placeholders(self) -> None:
        unknown = set()
        for match in self._template.pattern.finditer(self.pattern):
            if match.group('invalid') is not None:
                raise ValidationError(
                    f"Archive pattern '{self.pattern}' contains an invalid placeholder"
                )
            name = match.group('named') or match.group('braced')
            if name and name not in self.SLOTS:
                unknown.add(name)
        if unknown:
            raise ValidationError(
                f"Archive pattern '{self.pattern}' uses unknown placeholder(s): "
                f"{', '.join(sorted(unknown))} (allowed: $source, $destination)"
            )

    def render(self, source: str, destination: str) -> str:
        return self._template.substitute(
            source=shlex.quote(source),
            destination=shlex.quote(destination)
        )

    def __bool__(self) -> bool:
        return bool(self.pattern)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ArchiveTemplate) and other.pattern == self.pattern

    def __repr__(self) -> str:
        return f"ArchiveTemplate({self.pattern!r})"


DEFAULT_ARCHIVE_PATTERN = 'pbzip2 --compress --best -c $source > $destination'


@dataclass(frozen=True)
class ConnectionParams:
    """Database to dump and how to reach it."""
    dbname: str
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.dbname, str) or not self.dbname:
            raise ValidationError("Database name must be a non-empty string")
        if self.port is not None and (isinstance(self.port, bool) or not isinstance(self.port, int)):
            raise ValidationError(f"Port must be an integer, got {self.port!r}")


@dataclass
class DumpOptions:
    """Validated options for a single dump invocation."""
    output_file: Optional[str] = None
    binary_path: str = "mysqldump"
    archive_path: Optional[str] = None
    archive_command_template: ArchiveTemplate = field(
        default_factory=lambda: ArchiveTemplate(DEFAULT_ARCHIVE_PATTERN)
    )
    archive_via_pipe: bool = False
    redact_blobs_as_hex: bool = False
    defaults_file: Optional[str] = None
    max_packet_size: Optional[str] = None
    dump_mode: Optional[DumpMode] = None
    selected_tables: list[str] = field(default_factory=list)
    excluded_tables: list[str] = field(default_factory=list)


@dataclass
class JobResult:
    """Outcome of one configured dump job."""
    database: str
    instance: str
    output_file: Optional[str] = None
    archive: Optional[str] = None
    success: bool = False
    error: Optional[str] = None


@dataclass
class RunStats:
    """Overall statistics for a run over the configured jobs."""
    jobs: list[JobResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[JobResult]:
        return [job for job in self.jobs if job.success]

    @property
    def failed(self) -> list[JobResult]:
        return [job for job in self.jobs if not job.success]


@dataclass
class DumpJob:
    """One configured dump: target database plus its merged options."""
    database: str
    instance: str = "primary"
    exclude_patterns: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)

    JOB_KEYS: ClassVar[tuple[str, ...]] = ('database', 'instance', 'exclude_patterns')

    @classmethod
    def from_configs(cls, defaults: dict[str, Any], job_config: dict[str, Any]) -> "DumpJob":
        """
        Create a DumpJob by merging configs with priority: job > defaults.

        Keys other than database, instance and exclude_patterns are dump
        options and are validated later by validate_options().
        """
        merged = {**defaults, **job_config}
        if not merged.get('database') or not isinstance(merged['database'], str):
            raise ValidationError("Dump job is missing the 'database' key")
        patterns = merged.get('exclude_patterns') or []
        if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
            raise ValidationError("'exclude_patterns' must be a list of strings")
        return cls(
            database=merged['database'],
            instance=merged.get('instance') or 'primary',
            exclude_patterns=list(patterns),
            options={k: v for k, v in merged.items() if k not in cls.JOB_KEYS}
        )
