"""
Unit tests for dumper.py
"""

import os
import stat
import tempfile
from pathlib import Path
from unittest import mock

import pytest

from mysqldump_archiver.dumper import MysqlDump
from mysqldump_archiver.exceptions import (
    ExecutionError,
    FilesystemPreconditionError,
    ValidationError,
)
from mysqldump_archiver.models import ConnectionParams

FAKE_DUMP = """#!/bin/sh
echo "-- args: $*"
echo "CREATE DEFINER=\\`root\\`@\\`%\\` PROCEDURE p() BEGIN END;"
echo "/*!50013 DEFINER=\\`admin\\`@\\`localhost\\` SQL SECURITY DEFINER */"
"""

FAILING_DUMP = """#!/bin/sh
echo "mysqldump: Got error: 1045: Access denied" >&2
exit 2
"""


@pytest.fixture
def workdir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def write_script(path: Path, body: str) -> str:
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path)


class TestRunWithMockedExecute:
    """Tests for MysqlDump.run with execute patched out."""

    def test_returns_true(self, workdir):
        dumper = MysqlDump(ConnectionParams(dbname="shop"))
        with mock.patch.object(MysqlDump, 'execute', return_value="") as mock_execute:
            assert dumper.run({"file": str(workdir / "out.sql")}) is True

        command = mock_execute.call_args[0][0]
        assert command.startswith("mysqldump ")
        assert "--single-transaction --routines --triggers shop" in command
        assert command.endswith(f"> {workdir / 'out.sql'}")

    def test_validation_error_before_execute(self):
        dumper = MysqlDump(ConnectionParams(dbname="shop"))
        with mock.patch.object(MysqlDump, 'execute') as mock_execute:
            with pytest.raises(ValidationError):
                dumper.run({})
        mock_execute.assert_not_called()

    def test_missing_directory_before_execute(self, workdir):
        dumper = MysqlDump(ConnectionParams(dbname="shop"))
        with mock.patch.object(MysqlDump, 'execute') as mock_execute:
            with pytest.raises(FilesystemPreconditionError):
                dumper.run({"file": str(workdir / "nope" / "out.sql")})
        mock_execute.assert_not_called()

    def test_execution_error_propagates(self, workdir):
        dumper = MysqlDump(ConnectionParams(dbname="shop"))
        with mock.patch.object(MysqlDump, 'execute', side_effect=ExecutionError("boom\n", 1)):
            with pytest.raises(ExecutionError) as exc_info:
                dumper.run({"file": str(workdir / "out.sql")})
        assert str(exc_info.value) == "boom\n"

    def test_password_not_logged(self, workdir, caplog):
        dumper = MysqlDump(ConnectionParams(dbname="shop", password="hunter2"))
        with mock.patch.object(MysqlDump, 'execute', return_value=""):
            with caplog.at_level("DEBUG"):
                dumper.run({"file": str(workdir / "out.sql")})
        assert "hunter2" not in caplog.text
        assert "--password=****" in caplog.text

    @mock.patch('mysqldump_archiver.dumper.execute_command')
    def test_execute_uses_timeout(self, mock_execute_command):
        mock_execute_command.return_value = "out"
        dumper = MysqlDump(ConnectionParams(dbname="shop"), timeout=10)
        assert dumper.execute("true") == "out"
        mock_execute_command.assert_called_once_with("true", timeout=10)


class TestBuild:
    """Tests for MysqlDump.build."""

    def test_build_masks_secrets(self, workdir):
        dumper = MysqlDump(ConnectionParams(dbname="shop", password="hunter2"))
        command = dumper.build({"file": str(workdir / "out.sql")}, mask_secrets=True)
        assert "hunter2" not in command

    def test_build_validates(self):
        dumper = MysqlDump(ConnectionParams(dbname="shop"))
        with pytest.raises(ValidationError):
            dumper.build({"unknown": 1})


class TestRunWithFakeBinary:
    """Runs the real pipeline against a stand-in mysqldump script."""

    def test_empty_file_runs_nothing(self, workdir):
        binary = write_script(workdir / "mysqldump", FAKE_DUMP)

        with mock.patch.object(MysqlDump, 'execute') as mock_execute:
            with pytest.raises(ValidationError):
                MysqlDump(ConnectionParams(dbname="shop")).run({"file": "", "mysqldump_bin": binary})
        mock_execute.assert_not_called()

    def test_definer_stripped(self, workdir):
        binary = write_script(workdir / "mysqldump", FAKE_DUMP)
        output = workdir / "out.sql"

        MysqlDump(ConnectionParams(dbname="shop", user="backup")).run({
            "file": str(output),
            "mysqldump_bin": binary
        })

        content = output.read_text()
        assert "DEFINER=" not in content
        assert "PROCEDURE p() BEGIN END;" in content
        assert "SQL SECURITY DEFINER" in content
        assert "--user=backup --single-transaction --routines --triggers shop" in content

    def test_archive_from_file(self, workdir):
        binary = write_script(workdir / "mysqldump", FAKE_DUMP)
        output = workdir / "out.sql"
        archive = workdir / "out copy.sql"

        MysqlDump(ConnectionParams(dbname="shop")).run({
            "file": str(output),
            "archive": str(archive),
            "archive_pattern": "cp $source $destination",
            "mysqldump_bin": binary
        })

        assert archive.read_text() == output.read_text()

    def test_archive_via_pipe(self, workdir):
        binary = write_script(workdir / "mysqldump", FAKE_DUMP)
        archive = workdir / "piped.sql"

        MysqlDump(ConnectionParams(dbname="shop")).run({
            "archive": str(archive),
            "archive_pipe": True,
            "archive_pattern": "cat > $destination",
            "mysqldump_bin": binary
        })

        content = archive.read_text()
        assert "PROCEDURE p()" in content
        assert "DEFINER=" not in content
        assert sorted(os.listdir(workdir)) == ["mysqldump", "piped.sql"]

    def test_failed_archive_surfaces_stderr(self, workdir):
        binary = write_script(workdir / "mysqldump", FAKE_DUMP)

        with pytest.raises(ExecutionError) as exc_info:
            MysqlDump(ConnectionParams(dbname="shop")).run({
                "file": str(workdir / "out.sql"),
                "archive": str(workdir / "out.bz2"),
                "archive_pattern": "echo 'archiver failed' >&2; exit 1; $source $destination",
                "mysqldump_bin": binary
            })
        assert str(exc_info.value) == "archiver failed\n"

