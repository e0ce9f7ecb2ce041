#!/usr/bin/env python3
"""
MySQL Dump Archiver - CLI Entry Point
=====================================
Runs the mysqldump jobs described in a YAML configuration file:
- DEFINER clauses stripped from the dump
- Schema-only or data-only dumps
- Selected and ignored tables, with wildcard exclusion patterns
- Archiving with pbzip2 (or any command), from the dump file or piped
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .runner import DumpRunner
from .utils import setup_logging


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='MySQL Dump Archiver - mysqldump backups with optional archiving'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show the dump commands without running them'
    )
    parser.add_argument(
        '-d', '--database',
        help='Run only the job for the specified database'
    )
    parser.add_argument(
        '-i', '--instance',
        help='Run only jobs on the specified instance'
    )

    args = parser.parse_args()

    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found", file=sys.stderr)
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}", file=sys.stderr)
        sys.exit(1)

    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    if args.dry_run:
        logging.info("DRY RUN MODE - No dump will be run")

    runner = DumpRunner(config)
    stats = runner.run(
        database_filter=args.database,
        instance_filter=args.instance,
        dry_run=args.dry_run
    )

    logging.info("=" * 50)
    logging.info("DRY RUN COMPLETE" if args.dry_run else "DUMP COMPLETE")
    logging.info(f"Jobs: {len(stats.jobs)}")
    logging.info(f"Succeeded: {len(stats.succeeded)}")

    if stats.failed:
        logging.warning(f"Errors: {len(stats.failed)}")
        for job in stats.failed:
            logging.warning(f"  - {job.database}@{job.instance}: {job.error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
