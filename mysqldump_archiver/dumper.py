"""
Dump orchestration for MySQL Dump Archiver.
"""

import logging
from typing import Any, Mapping, Union

from .command import build_command
from .executor import DEFAULT_TIMEOUT, execute_command
from .models import ConnectionParams, DumpOptions
from .options import validate_options


class MysqlDump:
    """
    Produces a database dump with mysqldump, optionally archived.

    The dump is written through a filter that drops DEFINER clauses, then
    either saved to a file, archived from that file, or piped straight into
    the archive command.
    """

    def __init__(self, connection: ConnectionParams, timeout: float = DEFAULT_TIMEOUT):
        self.connection = connection
        self.timeout = timeout

    def build(
        self,
        options: Union[Mapping[str, Any], DumpOptions],
        mask_secrets: bool = False
    ) -> str:
        """Validate options and return the command line without running it."""
        return build_command(self.connection, validate_options(options), mask_secrets)

    def run(self, options: Union[Mapping[str, Any], DumpOptions]) -> bool:
        """
        Validate options, build the pipeline and run it.

        Returns True on success. Validation and filesystem errors are raised
        before anything is executed; a failing pipeline raises ExecutionError
        with the captured standard error.
        """
        validated = validate_options(options)
        command = build_command(self.connection, validated)

        logging.info(f"Dumping database '{self.connection.dbname}'")
        logging.debug(f"Dump command: {build_command(self.connection, validated, mask_secrets=True)}")

        self.execute(command)

        if validated.output_file and not validated.archive_via_pipe:
            logging.info(f"Wrote dump to {validated.output_file}")
        if validated.archive_path:
            logging.info(f"Wrote archive to {validated.archive_path}")
        return True

    def execute(self, command: str) -> str:
        return execute_command(command, timeout=self.timeout)
