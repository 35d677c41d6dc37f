from __future__ import annotations

import logging
import os
import shutil
import subprocess
from typing import IO

from .exceptions import ToolExitedNonZero, ToolNotFound
from .process_utils import decode_output, finish_process
from .settings import get_setting

logger = logging.getLogger(__name__)


class SqliteTool:
    """Thin subprocess wrapper around the sqlite3 command-line shell."""

    def __init__(self, binary: str | None = None):
        self.binary = binary or str(get_setting("SQLITE_BINARY"))

    def locate(self) -> str | None:
        """Return the resolved executable path, or ``None`` if it is not on PATH."""
        return shutil.which(self.binary)

    def require(self) -> str:
        executable = self.locate()
        if executable is None:
            raise ToolNotFound(self.binary)
        return executable

    def dump(self, db_file: str | os.PathLike, stdout: IO[bytes]) -> None:
        """Write a full SQL dump of ``db_file`` to the open file ``stdout``."""
        cmd = [self.require(), os.fspath(db_file), ".dump"]
        self._run(cmd, stdout=stdout)

    def read(self, db_file: str | os.PathLike, script: str | os.PathLike) -> str:
        """Replay the SQL ``script`` against ``db_file`` and return the captured output."""
        cmd = [self.require(), os.fspath(db_file), f".read {self._quote(os.fspath(script))}"]
        return self._run(cmd, stdout=subprocess.PIPE)

    def _run(self, cmd: list[str], stdout: IO[bytes] | int) -> str:
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.Popen(cmd, stdin=subprocess.DEVNULL, stdout=stdout, stderr=subprocess.PIPE)
        except OSError as exc:
            raise self._command_error(cmd, exc) from exc
        out, err = finish_process(proc)
        output = decode_output(out, err)
        if proc.returncode != 0:
            raise ToolExitedNonZero(cmd, proc.returncode, output)
        return output

    @staticmethod
    def _quote(path: str) -> str:
        # Dot-command arguments are split on whitespace unless quoted.
        if any(ch.isspace() for ch in path) or '"' in path:
            escaped = path.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return path

    def _command_error(self, cmd: list[str], exc: OSError) -> ToolNotFound | ToolExitedNonZero:
        if exc.errno == 2:
            return ToolNotFound(self.binary)
        return ToolExitedNonZero(cmd, 1, str(exc))
