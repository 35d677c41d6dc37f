from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

FileRef = Union[str, os.PathLike, Callable[[], Union[str, os.PathLike, None]], None]

SQLITE_TYPE_MAPPING: Mapping[type, str | None] = MappingProxyType(
    {
        int: "INTEGER",
        float: "REAL",
        object: "TEXT",
        type(None): None,
    }
)

LIST_TABLES_QUERY = (
    "SELECT name FROM sqlite_master WHERE type = 'table' AND substr(name, 1, 7) <> 'sqlite_' ORDER BY name"
)


def is_transient(name: str | os.PathLike | None) -> bool:
    """Return whether a database name refers to no file on disk."""
    if name is None:
        return True
    value = os.fspath(name)
    if value in ("", ":memory:"):
        return True
    return value.startswith("file:") and "mode=memory" in value


class BaseConnector(ABC):
    """Base class for SQLite connectors.

    A connector is bound to one open database handle and exposes the few
    capabilities dump and restore need: the backing file, a query entry point
    and ``close()``.
    """

    TYPE_MAPPING: Mapping[type, str | None] = SQLITE_TYPE_MAPPING

    @property
    @abstractmethod
    def file(self) -> FileRef:
        """Literal path, a zero-argument callable resolving to one, or ``None``."""

    @abstractmethod
    def execute(self, query: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        """Run a single query and return all rows."""

    @abstractmethod
    def close(self) -> None:
        """Close the underlying handle."""

    def resolve_file(self) -> Path | None:
        ref = self.file
        if callable(ref):
            ref = ref()
        if is_transient(ref):
            return None
        return Path(os.fspath(ref))  # type: ignore[arg-type]

    def column_type(self, python_type: type) -> str | None:
        for klass in python_type.__mro__:
            if klass in self.TYPE_MAPPING:
                return self.TYPE_MAPPING[klass]
        return self.TYPE_MAPPING[object]

    def user_version(self) -> int:
        rows = self.execute("PRAGMA user_version")
        return int(rows[0][0]) if rows else 0

    def list_tables(self) -> list[str]:
        return [row[0] for row in self.execute(LIST_TABLES_QUERY)]
