from __future__ import annotations

import io
import subprocess
from unittest.mock import MagicMock, patch

import pytest
from django.test import override_settings

from django_sqlite_dump.exceptions import ToolExitedNonZero, ToolNotFound
from django_sqlite_dump.tool import SqliteTool


def _proc(returncode: int = 0, stdout: bytes | None = b"", stderr: bytes = b"") -> MagicMock:
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate.return_value = (stdout, stderr)
    return proc


class TestSqliteTool:
    def test_binary_from_settings(self):
        assert SqliteTool().binary == "sqlite3"
        with override_settings(DJANGO_SQLITE_DUMP={"SQLITE_BINARY": "/opt/sqlite/bin/sqlite3"}):
            assert SqliteTool().binary == "/opt/sqlite/bin/sqlite3"

    @patch("django_sqlite_dump.tool.shutil.which")
    def test_locate(self, mock_which: MagicMock):
        mock_which.return_value = "/usr/bin/sqlite3"
        assert SqliteTool().locate() == "/usr/bin/sqlite3"
        mock_which.assert_called_once_with("sqlite3")

    @patch("django_sqlite_dump.tool.shutil.which", return_value=None)
    def test_require_raises_when_missing(self, _mock_which: MagicMock):
        with pytest.raises(ToolNotFound) as exc_info:
            SqliteTool().require()
        assert exc_info.value.binary == "sqlite3"

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_dump(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.return_value = _proc(stdout=None)
        out = io.BytesIO()

        SqliteTool().dump("/tmp/test.db", out)

        cmd = mock_popen.call_args[0][0]
        assert cmd == ["/usr/bin/sqlite3", "/tmp/test.db", ".dump"]
        assert mock_popen.call_args[1]["stdout"] is out
        assert mock_popen.call_args[1]["stderr"] == subprocess.PIPE

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_dump_non_zero_exit(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.return_value = _proc(returncode=1, stdout=None, stderr=b"Error: file is not a database\n")

        with pytest.raises(ToolExitedNonZero) as exc_info:
            SqliteTool().dump("/tmp/test.db", io.BytesIO())

        assert exc_info.value.returncode == 1
        assert exc_info.value.output == "Error: file is not a database"

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_read(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.return_value = _proc(stdout=b"ok\n")

        output = SqliteTool().read("/tmp/test.db", "/tmp/test.sql")

        cmd = mock_popen.call_args[0][0]
        assert cmd == ["/usr/bin/sqlite3", "/tmp/test.db", ".read /tmp/test.sql"]
        assert mock_popen.call_args[1]["stdout"] == subprocess.PIPE
        assert mock_popen.call_args[1]["stdin"] == subprocess.DEVNULL
        assert output == "ok"

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_read_quotes_paths_with_spaces(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.return_value = _proc()

        SqliteTool().read("/tmp/test.db", "/tmp/my dumps/test.sql")

        assert mock_popen.call_args[0][0][2] == '.read "/tmp/my dumps/test.sql"'

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_read_failure_carries_output(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.return_value = _proc(returncode=1, stdout=b"", stderr=b"Parse error near line 3\n")

        with pytest.raises(ToolExitedNonZero, match="Parse error near line 3") as exc_info:
            SqliteTool().read("/tmp/test.db", "/tmp/test.sql")

        assert exc_info.value.cmd[-1] == ".read /tmp/test.sql"

    @patch("django_sqlite_dump.tool.shutil.which", return_value=None)
    @patch("django_sqlite_dump.tool.subprocess.Popen")
    def test_missing_tool_never_spawns(self, mock_popen: MagicMock, _mock_which: MagicMock):
        with pytest.raises(ToolNotFound):
            SqliteTool().read("/tmp/test.db", "/tmp/test.sql")
        mock_popen.assert_not_called()

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_spawn_file_not_found(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.side_effect = FileNotFoundError(2, "No such file or directory", "sqlite3")

        with pytest.raises(ToolNotFound):
            SqliteTool().dump("/tmp/test.db", io.BytesIO())

    @patch("django_sqlite_dump.tool.subprocess.Popen")
    @patch("django_sqlite_dump.tool.shutil.which", return_value="/usr/bin/sqlite3")
    def test_spawn_oserror(self, _mock_which: MagicMock, mock_popen: MagicMock):
        mock_popen.side_effect = OSError(13, "Permission denied")

        with pytest.raises(ToolExitedNonZero, match="Permission denied"):
            SqliteTool().read("/tmp/test.db", "/tmp/test.sql")
