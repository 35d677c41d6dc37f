from __future__ import annotations

import os
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import NamedTuple

from .settings import get_setting

SQL_SUFFIX = ".sql"
COPY_SUFFIX = ".db"


class DumpArtifact(NamedTuple):
    path: Path
    version: int | None
    timestamp: str | None

    @property
    def is_sql(self) -> bool:
        return self.path.suffix == SQL_SUFFIX


def derive_dump_path(
    db_file: str | os.PathLike,
    version: int | None = None,
    now: datetime | None = None,
    suffix: str = SQL_SUFFIX,
) -> Path:
    """Compute the dump artifact path for a database file.

    ``/a/b/foo.db`` becomes ``/a/b/foo.sql``, or ``/a/b/foo-v3-20240115-1200.sql``
    when a version is given.
    """
    source = Path(db_file)
    stem = source.stem
    if version is not None:
        now = now or datetime.now(tz=UTC)
        date_format = str(get_setting("DUMP_DATE_FORMAT"))
        stem = f"{stem}-v{version}-{now.strftime(date_format)}"
    return source.with_name(f"{stem}{suffix}")


def parse_dump_name(db_file: str | os.PathLike, candidate: str | os.PathLike) -> DumpArtifact | None:
    """Recognise ``candidate`` as an artifact derived from ``db_file``."""
    source = Path(db_file)
    path = Path(candidate)
    pattern = re.compile(
        rf"{re.escape(source.stem)}(?:-v(?P<version>\d+)-(?P<timestamp>[^/]+?))?(?P<suffix>\.sql|\.db)"
    )
    match = pattern.fullmatch(path.name)
    if not match:
        return None
    version = match.group("version")
    if version is None and match.group("suffix") == COPY_SUFFIX:
        # Unversioned .db siblings are databases, not copies.
        return None
    return DumpArtifact(
        path=path,
        version=int(version) if version is not None else None,
        timestamp=match.group("timestamp"),
    )


def find_dumps(db_file: str | os.PathLike) -> list[DumpArtifact]:
    """List the dump artifacts beside ``db_file``, newest first."""
    source = Path(db_file)
    if not source.parent.is_dir():
        return []
    found = []
    for entry in source.parent.iterdir():
        if entry == source or not entry.is_file():
            continue
        artifact = parse_dump_name(source, entry)
        if artifact is not None:
            found.append(artifact)
    found.sort(key=lambda a: a.path.stat().st_mtime, reverse=True)
    return found
