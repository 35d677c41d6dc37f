from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from typing import Any

from django.db import connections

from .base import BaseConnector, FileRef


class DjangoSqliteConnector(BaseConnector):
    """Connector for a SQLite database configured under a Django alias.

    The file is looked up through the alias each time it is resolved, so test
    databases and overridden settings are honoured.
    """

    def __init__(self, alias: str = "default"):
        self.alias = alias

    @property
    def file(self) -> FileRef:
        return self._settings_name

    def _settings_name(self) -> Any:
        return connections[self.alias].settings_dict.get("NAME")

    def execute(self, query: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        with connections[self.alias].cursor() as cursor:
            cursor.execute(query, params)
            return list(cursor.fetchall())

    def close(self) -> None:
        connections[self.alias].close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.alias!r})"


class Sqlite3Connector(BaseConnector):
    """Connector for a plain ``sqlite3.Connection``.

    Without an explicit ``file`` the path of the ``main`` database is read from
    ``PRAGMA database_list`` when resolved.
    """

    def __init__(self, connection: sqlite3.Connection, file: FileRef = None):
        self.connection = connection
        self._file = file

    @property
    def file(self) -> FileRef:
        if self._file is not None:
            return self._file
        return self._main_database_file

    def _main_database_file(self) -> str | None:
        for _seq, name, path in self.execute("PRAGMA database_list"):
            if name == "main":
                return path or None
        return None

    def execute(self, query: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        cursor = self.connection.execute(query, params)
        try:
            return cursor.fetchall()
        finally:
            cursor.close()

    def close(self) -> None:
        self.connection.close()
