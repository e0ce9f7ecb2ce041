"""
Runs every dump job defined in a configuration file.
"""

import logging
from typing import Any, Optional

from mysql.connector import Error as MySQLError

from .config import ConfigLoader
from .connection import DatabaseConnection
from .dumper import MysqlDump
from .exceptions import DumpError, ValidationError
from .models import ConnectionParams, DumpJob, JobResult, RunStats
from .options import validate_options
from .tables import match_tables, merge_ignored_tables
from .utils import format_job_display


class DumpRunner:
    """Main class for running the configured dump jobs."""

    def __init__(self, config: ConfigLoader):
        self.config = config
        self.defaults = config.get_defaults()
        self.stats = RunStats()

    def run(
        self,
        database_filter: Optional[str] = None,
        instance_filter: Optional[str] = None,
        dry_run: bool = False
    ) -> RunStats:
        """Run the configured dump jobs.

        Args:
            database_filter: If specified, only run jobs for this database
            instance_filter: If specified, only run jobs on this instance
            dry_run: Log the commands instead of executing them
        """
        job_configs = self._filter_jobs(database_filter, instance_filter)
        logging.info(f"Starting {len(job_configs)} dump job(s)")

        for job_config in job_configs:
            self.stats.jobs.append(self._run_job(job_config, dry_run))

        return self.stats

    def _filter_jobs(
        self,
        database_filter: Optional[str],
        instance_filter: Optional[str]
    ) -> list[dict[str, Any]]:
        jobs = self.config.get_dumps()

        if database_filter:
            jobs = [job for job in jobs if isinstance(job, dict) and job.get('database') == database_filter]
            if not jobs:
                logging.warning(f"No dump job for database '{database_filter}' found in configuration")

        if instance_filter:
            jobs = [
                job for job in jobs
                if isinstance(job, dict) and (job.get('instance') or 'primary') == instance_filter
            ]
            if not jobs:
                logging.warning(f"No dump jobs found for instance '{instance_filter}'")

        return jobs

    def _run_job(self, job_config: dict[str, Any], dry_run: bool) -> JobResult:
        if not isinstance(job_config, dict):
            error = f"Dump job must be a mapping, got {job_config!r}"
            logging.error(f"  ✗ {error}")
            return JobResult(database=str(job_config), instance='primary', error=error)

        result = JobResult(
            database=str(job_config.get('database')),
            instance=job_config.get('instance') or 'primary'
        )

        try:
            job = DumpJob.from_configs(self.defaults, job_config)
            result.output_file = job.options.get('file')
            result.archive = job.options.get('archive')
            details = format_job_display(job)
            logging.info(
                f"Dump job: {job.database} on {job.instance}"
                + (f" ({', '.join(details)})" if details else "")
            )

            params = self._connection_params(job)
            dumper = MysqlDump(params)

            if dry_run:
                if job.exclude_patterns:
                    logging.info(f"  exclude_patterns resolved at run time: {', '.join(job.exclude_patterns)}")
                logging.info(f"  Would run: {dumper.build(job.options, mask_secrets=True)}")
            else:
                options = self._resolve_exclusions(job, params)
                dumper.run(options)
            result.success = True

        except (DumpError, ValueError, MySQLError) as e:
            result.error = str(e).strip() or e.__class__.__name__
            logging.error(f"  ✗ {result.database}: {result.error}")
        else:
            if not dry_run:
                logging.info(f"  ✓ {result.database}")

        return result

    def _connection_params(self, job: DumpJob) -> ConnectionParams:
        instance = self.config.get_instance(job.instance)
        port = instance.get('port')
        if port in (None, ''):
            port = None
        else:
            try:
                port = int(port)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"Instance '{job.instance}' has an invalid port: {port!r}"
                ) from None

        return ConnectionParams(
            dbname=job.database,
            host=instance.get('host') or None,
            port=port,
            user=instance.get('user') or None,
            password=instance.get('password') or None
        )

    def _resolve_exclusions(self, job: DumpJob, params: ConnectionParams):
        """Expand exclude_patterns against the live table list."""
        options = validate_options(job.options)
        if not job.exclude_patterns:
            return options

        with DatabaseConnection.from_params(params) as conn:
            tables = conn.get_tables()

        matched = match_tables(tables, job.exclude_patterns)
        logging.info(f"  Excluding {len(matched)} table(s) matching exclusion patterns")

        options.excluded_tables = merge_ignored_tables(options.excluded_tables, matched)
        return options
