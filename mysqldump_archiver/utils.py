"""
Utility functions for MySQL Dump Archiver.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import DumpJob

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging from the config's logging section."""
    log_level = getattr(logging, str(log_settings.get('level', 'INFO')).upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=log_settings.get('format', LOG_FORMAT),
        handlers=handlers,
        force=True
    )


def format_job_display(job: DumpJob) -> list[str]:
    """Format the notable options of a job for log output."""
    options = job.options
    parts = []
    if options.get('dump_type'):
        parts.append(f"type={options['dump_type']}")
    if options.get('selected_tables'):
        parts.append(f"tables={_join(options['selected_tables'])}")
    if options.get('ignored_tables'):
        parts.append(f"ignored={_join(options['ignored_tables'])}")
    if job.exclude_patterns:
        parts.append(f"exclude_patterns={_join(job.exclude_patterns)}")
    if options.get('archive'):
        mode = 'pipe' if options.get('archive_pipe') else 'file'
        parts.append(f"archive={options['archive']} ({mode})")
    if options.get('hex_blob'):
        parts.append("hex_blob")
    return parts


def _join(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ','.join(str(item) for item in value)
    return str(value)
