"""SQLite primary result codes and the error categories callers act on.

The numeric codes are defined by the SQLite engine, not by this package. Extended
result codes carry the primary code in their low byte.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import NamedTuple

from .exceptions import UnknownErrorCode


class ErrorCategory(Enum):
    GENERIC = "generic"
    INTERNAL = "internal"
    ACCESS_DENIED = "access-denied"
    LOCKED = "locked"
    OUT_OF_MEMORY = "out-of-memory"
    CORRUPTION = "corruption"
    CONSTRAINT = "constraint-violation"
    WARNING = "warning"
    NOTICE = "notice"

    @property
    def retryable(self) -> bool:
        return self is ErrorCategory.LOCKED


class ResultCode(NamedTuple):
    code: int
    name: str
    category: ErrorCategory
    message: str | None


RESULT_CODES: tuple[ResultCode, ...] = (
    ResultCode(1, "SQLITE_ERROR", ErrorCategory.GENERIC, "SQL logic error"),
    ResultCode(2, "SQLITE_INTERNAL", ErrorCategory.INTERNAL, None),
    ResultCode(3, "SQLITE_PERM", ErrorCategory.ACCESS_DENIED, "access permission denied"),
    ResultCode(4, "SQLITE_ABORT", ErrorCategory.GENERIC, "query aborted"),
    ResultCode(5, "SQLITE_BUSY", ErrorCategory.LOCKED, "database is locked"),
    ResultCode(6, "SQLITE_LOCKED", ErrorCategory.LOCKED, "database table is locked"),
    ResultCode(7, "SQLITE_NOMEM", ErrorCategory.OUT_OF_MEMORY, "out of memory"),
    ResultCode(8, "SQLITE_READONLY", ErrorCategory.ACCESS_DENIED, "attempt to write a readonly database"),
    ResultCode(9, "SQLITE_INTERRUPT", ErrorCategory.GENERIC, "interrupted"),
    ResultCode(10, "SQLITE_IOERR", ErrorCategory.ACCESS_DENIED, "disk I/O error"),
    ResultCode(11, "SQLITE_CORRUPT", ErrorCategory.CORRUPTION, "database disk image is malformed"),
    ResultCode(12, "SQLITE_NOTFOUND", ErrorCategory.INTERNAL, "unknown operation"),
    ResultCode(13, "SQLITE_FULL", ErrorCategory.ACCESS_DENIED, "database or disk is full"),
    ResultCode(14, "SQLITE_CANTOPEN", ErrorCategory.ACCESS_DENIED, "unable to open database file"),
    ResultCode(15, "SQLITE_PROTOCOL", ErrorCategory.ACCESS_DENIED, "locking protocol"),
    ResultCode(16, "SQLITE_EMPTY", ErrorCategory.INTERNAL, None),
    ResultCode(17, "SQLITE_SCHEMA", ErrorCategory.GENERIC, "database schema has changed"),
    ResultCode(18, "SQLITE_TOOBIG", ErrorCategory.GENERIC, "string or blob too big"),
    ResultCode(19, "SQLITE_CONSTRAINT", ErrorCategory.CONSTRAINT, "constraint failed"),
    ResultCode(20, "SQLITE_MISMATCH", ErrorCategory.GENERIC, "datatype mismatch"),
    ResultCode(21, "SQLITE_MISUSE", ErrorCategory.GENERIC, "bad parameter or other API misuse"),
    ResultCode(22, "SQLITE_NOLFS", ErrorCategory.GENERIC, "large file support is disabled"),
    ResultCode(23, "SQLITE_AUTH", ErrorCategory.ACCESS_DENIED, "authorization denied"),
    ResultCode(24, "SQLITE_FORMAT", ErrorCategory.CORRUPTION, None),
    ResultCode(25, "SQLITE_RANGE", ErrorCategory.GENERIC, "column index out of range"),
    ResultCode(26, "SQLITE_NOTADB", ErrorCategory.CORRUPTION, "file is not a database"),
    ResultCode(27, "SQLITE_NOTICE", ErrorCategory.NOTICE, "notification message"),
    ResultCode(28, "SQLITE_WARNING", ErrorCategory.WARNING, "warning message"),
)

_BY_CODE = MappingProxyType({entry.code: entry for entry in RESULT_CODES})


def lookup(code: int) -> ResultCode | None:
    return _BY_CODE.get(code)


def classify(code: int) -> ResultCode:
    """Return the registry entry for a primary result code.

    Raises ``UnknownErrorCode`` for codes outside the table; there is no
    fallback category.
    """
    entry = _BY_CODE.get(code)
    if entry is None:
        raise UnknownErrorCode(code)
    return entry


def engine_code(exc: BaseException) -> int | None:
    """Find the engine result code attached to ``exc`` or the errors it wraps."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        code = getattr(current, "sqlite_errorcode", None)
        if isinstance(code, int):
            return code
        current = current.__cause__ or current.__context__
    return None


def classify_exception(exc: BaseException) -> ResultCode | None:
    """Classify an engine-originated exception, or return ``None`` if it carries no code.

    Django re-raises ``sqlite3`` errors as ``django.db.utils`` errors chained to
    the original, so the cause chain is searched. Extended codes are reduced to
    their primary code.
    """
    code = engine_code(exc)
    if code is None:
        return None
    return classify(code & 0xFF)
