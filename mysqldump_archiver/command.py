"""
Shell command assembly for MySQL Dump Archiver.
"""

from shlex import quote

from .models import ConnectionParams, DumpOptions

# Strips DEFINER=`user`@`host` so the dump restores under any account
DEFINER_FILTER = r" | sed 's/DEFINER=[^ |\*]*//g'"

MASKED_PASSWORD = '****'


def build_command(
    connection: ConnectionParams,
    options: DumpOptions,
    mask_secrets: bool = False
) -> str:
    """
    Build the full dump pipeline for a validated set of options.

    Every value coming from the connection or the options is escaped on its
    own; the archive pattern and the DEFINER filter are inserted verbatim.

    Args:
        connection: Database name and connection parameters.
        options: Options returned by validate_options().
        mask_secrets: Render the password as a placeholder, for logging.

    Returns:
        A single command line to run through the shell.
    """
    command = quote(options.binary_path)

    if options.defaults_file:
        command += f" --defaults-extra-file={quote(options.defaults_file)}"

    if options.max_packet_size:
        command += f" --max_allowed_packet={quote(options.max_packet_size)}"

    command += _connection_flags(connection, mask_secrets)
    command += f" --single-transaction --routines --triggers {quote(connection.dbname)}"

    if options.dump_mode is not None:
        command += f" {options.dump_mode.flags}"

    if options.redact_blobs_as_hex:
        command += " --hex-blob"

    for table in options.selected_tables:
        command += f" {quote(table)}"

    for table in options.excluded_tables:
        command += f" --ignore-table={quote(connection.dbname)}.{quote(table)}"

    command += DEFINER_FILTER

    if options.output_file and not options.archive_via_pipe:
        command += f" > {quote(options.output_file)}"

    if options.archive_path and options.archive_command_template:
        command += " | " if options.archive_via_pipe else " && "
        command += options.archive_command_template.render(
            options.output_file or '',
            options.archive_path
        )

    return command


def _connection_flags(connection: ConnectionParams, mask_secrets: bool) -> str:
    flags = ""
    if connection.host:
        flags += f" --host={quote(connection.host)}"
    if connection.port:
        flags += f" --port={connection.port}"
    if connection.user:
        flags += f" --user={quote(connection.user)}"
    if connection.password:
        password = MASKED_PASSWORD if mask_secrets else quote(connection.password)
        flags += f" --password={password}"
    return flags
