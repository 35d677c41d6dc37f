"""Whole-database dump and restore through the sqlite3 command-line shell.

Dumps are plain SQL text produced by ``sqlite3 <db> .dump``. Restores replay such
a script with ``sqlite3 <db> ".read <script>"``. Existing artifacts are never
overwritten.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import sqlite3
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from django.db import Error as DjangoDatabaseError

from .db.base import BaseConnector
from .exceptions import ConnectorError, DestinationExists, ToolNotFound
from .filenames import COPY_SUFFIX, derive_dump_path
from .result_codes import classify_exception
from .settings import get_setting
from .tool import SqliteTool

logger = logging.getLogger(__name__)

FOREIGN_KEYS_OFF = b"PRAGMA foreign_keys=OFF;"
FOREIGN_KEYS_ON = b"PRAGMA foreign_keys=ON;"

SIDECAR_SUFFIXES = ("-journal", "-wal", "-shm")


def dump(
    connector: BaseConnector,
    version_qualified: bool = False,
    *,
    now: datetime | None = None,
    tool: SqliteTool | None = None,
) -> Path:
    """Write a SQL dump of the connector's database beside its file and return its path.

    With ``version_qualified`` the artifact name carries the database's
    ``user_version`` and a timestamp, and a plain file copy is made when the
    sqlite3 shell is unavailable.
    """
    try:
        version = connector.user_version()
    except (DjangoDatabaseError, sqlite3.Error) as exc:
        entry = classify_exception(exc)
        if entry is not None:
            logger.error("Reading user_version failed: %s (%s)", entry.name, entry.category.value)
        raise

    db_file = _require_file(connector)
    tool = tool or SqliteTool()

    if tool.locate() is None:
        if not version_qualified:
            raise ToolNotFound(tool.binary)
        destination = derive_dump_path(db_file, version, now, suffix=COPY_SUFFIX)
        logger.warning("%s not found, copying %s to %s", tool.binary, db_file, destination)
        _copy_database(db_file, destination)
        return destination

    destination = derive_dump_path(db_file, version if version_qualified else None, now)
    _dump_sql(tool, db_file, destination, version)
    logger.info("Dumped %s to %s", db_file, destination)
    return destination


def restore(
    destination: BaseConnector | str | os.PathLike,
    dump_file: str | os.PathLike,
    *,
    now: datetime | None = None,
    tool: SqliteTool | None = None,
) -> Path | None:
    """Rebuild a database from a SQL dump.

    The script is replayed into an empty staging file beside the target, which
    then replaces the target file. A failed replay leaves the target as it was.
    A connector destination is first backed up with a version-qualified dump
    and closed. Returns the backup path, if one was taken. No connection is
    reopened.
    """
    tool = tool or SqliteTool()
    tool.require()
    dump_file = Path(dump_file)
    if not dump_file.is_file():
        raise FileNotFoundError(errno.ENOENT, "Dump file not found", str(dump_file))

    backup: Path | None = None
    if isinstance(destination, BaseConnector):
        target = _require_file(destination)
        backup = dump(destination, version_qualified=True, now=now, tool=tool)
        destination.close()
    else:
        target = Path(destination)

    staged = target.with_name(f"{target.name}.restore-{uuid4().hex}")
    logger.debug("Replaying %s into %s", dump_file, staged)
    try:
        staged.open("xb").close()
        tool.read(staged, dump_file)
    except BaseException:
        _discard_database(staged)
        raise
    # Sidecars of the old file must not be applied to the new one.
    _discard_sidecars(target)
    os.replace(staged, target)
    logger.info("Restored %s from %s", target, dump_file)
    return backup


def enable_foreign_keys(path: str | os.PathLike, window: int | None = None) -> bool:
    """Rewrite the first ``PRAGMA foreign_keys=OFF;`` in the head of ``path`` to ``ON``.

    Only the first ``window`` bytes are searched. The rewritten file is staged
    beside ``path`` and moved over it. Returns whether a rewrite happened.
    """
    if window is None:
        window = int(get_setting("FOREIGN_KEYS_WINDOW"))  # type: ignore[arg-type]
    path = Path(path)
    staged = path.with_name(f"{path.name}.partial-{uuid4().hex}")
    with path.open("rb") as src:
        head = src.read(window)
        index = head.find(FOREIGN_KEYS_OFF)
        if index < 0:
            return False
        try:
            with staged.open("xb") as out:
                out.write(head[:index] + FOREIGN_KEYS_ON + head[index + len(FOREIGN_KEYS_OFF) :])
                shutil.copyfileobj(src, out)
        except BaseException:
            staged.unlink(missing_ok=True)
            raise
    os.replace(staged, path)
    return True


def _require_file(connector: BaseConnector) -> Path:
    db_file = connector.resolve_file()
    if db_file is None:
        raise ConnectorError(f"{connector!r} is not backed by a database file.")
    return db_file


def _dump_sql(tool: SqliteTool, db_file: Path, destination: Path, version: int) -> None:
    if destination.exists():
        raise DestinationExists(destination)
    try:
        out = destination.open("xb")
    except FileExistsError as exc:
        raise DestinationExists(destination) from exc
    try:
        with out:
            tool.dump(db_file, out)
            if version:
                out.seek(0, os.SEEK_END)
                out.write(f"PRAGMA user_version={version};\n".encode())
    except BaseException:
        destination.unlink(missing_ok=True)
        raise
    enable_foreign_keys(destination)


def _copy_database(db_file: Path, destination: Path) -> None:
    if destination.exists():
        raise DestinationExists(destination)
    try:
        out = destination.open("xb")
    except FileExistsError as exc:
        raise DestinationExists(destination) from exc
    try:
        with out, db_file.open("rb") as src:
            shutil.copyfileobj(src, out)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise


def _discard_sidecars(target: Path) -> None:
    for suffix in SIDECAR_SUFFIXES:
        target.with_name(target.name + suffix).unlink(missing_ok=True)


def _discard_database(target: Path) -> None:
    target.unlink(missing_ok=True)
    _discard_sidecars(target)
