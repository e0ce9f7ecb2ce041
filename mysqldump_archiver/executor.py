"""
Runs the assembled dump pipeline through the shell.
"""

import logging
import os
import signal
import subprocess

from .exceptions import ExecutionError

DEFAULT_TIMEOUT = 3600


def execute_command(command: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Run a shell command line and wait for it to finish.

    Returns the captured standard output. Raises ExecutionError carrying the
    captured standard error when the command exits non-zero, cannot be
    started, or runs longer than `timeout` seconds. On timeout every process
    of the pipeline is killed, not only the shell.
    """
    try:
        process = subprocess.Popen(
            command,
            shell=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            start_new_session=True
        )
    except OSError as e:
        raise ExecutionError(f"Failed to start command: {e}") from e

    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logging.error(f"Dump command timed out after {timeout} seconds")
        _kill_group(process)
        _, stderr = process.communicate()
        raise ExecutionError(
            stderr or f"Command timed out after {timeout} seconds"
        ) from None

    if process.returncode != 0:
        logging.debug(f"Dump command exited with code {process.returncode}")
        raise ExecutionError(stderr, returncode=process.returncode)

    return stdout


def _kill_group(process: subprocess.Popen) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
