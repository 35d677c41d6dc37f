from __future__ import annotations

from pathlib import Path


class DjangoSqliteDumpError(Exception):
    """Base exception for django-sqlite-dump."""


class ToolNotFound(DjangoSqliteDumpError):
    """Raised when the sqlite3 command-line tool is not on the search path."""

    def __init__(self, binary: str):
        self.binary = binary
        super().__init__(f"Command not found: {binary}. Ensure the sqlite3 shell is installed and on PATH.")


class DestinationExists(DjangoSqliteDumpError):
    """Raised instead of overwriting an existing dump artifact."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Refusing to overwrite existing file: {self.path}")


class ToolExitedNonZero(DjangoSqliteDumpError):
    """Raised when a sqlite3 subprocess fails."""

    def __init__(self, cmd: list[str], returncode: int, output: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.output = output
        cmdstr = " ".join(cmd)
        super().__init__(f"sqlite3 command failed (exit {returncode}): {cmdstr}\n{output}".strip())


class UnknownErrorCode(DjangoSqliteDumpError, LookupError):
    """Raised when the engine reports a result code missing from the registry."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Unknown SQLite result code: {code}")


class ConnectorError(DjangoSqliteDumpError):
    """Raised when a database connector cannot serve a dump or restore."""


class ConnectorNotFound(DjangoSqliteDumpError):
    """Raised when no connector is found for a database engine."""

    def __init__(self, engine: str):
        self.engine = engine
        super().__init__(f"No SQLite connector found for engine: {engine}")
