from __future__ import annotations

import shutil
from contextlib import suppress
from copy import deepcopy

import pytest
from django.conf import settings as django_settings
from django.db import connections
from django.test.utils import override_settings

SQLITE_ALIAS = "integration_sqlite"

BASE_DATABASES = deepcopy(django_settings.DATABASES)


def _sqlite3_available() -> bool:
    return shutil.which("sqlite3") is not None


requires_sqlite3 = pytest.mark.skipif(not _sqlite3_available(), reason="sqlite3 CLI not available")


def _integration_databases(name: str) -> dict[str, dict[str, object]]:
    databases = deepcopy(BASE_DATABASES)
    databases[SQLITE_ALIAS] = {"ENGINE": "django.db.backends.sqlite3", "NAME": name}
    return databases


def _refresh_connection_handler() -> None:
    connections.close_all()
    with suppress(AttributeError):
        del connections.settings
    connections._settings = None
    aliases = set(getattr(django_settings, "DATABASES", {}))
    aliases.add(SQLITE_ALIAS)
    for alias in aliases:
        with suppress(AttributeError):
            del connections[alias]


@pytest.fixture()
def setup_sqlite_db(tmp_path, django_db_blocker):
    """Set up a file-backed SQLite alias holding ``t(x INTEGER)`` with one row."""
    db_file = tmp_path / "site.db"
    with django_db_blocker.unblock():
        with override_settings(DATABASES=_integration_databases(str(db_file))):
            _refresh_connection_handler()
            with connections[SQLITE_ALIAS].cursor() as cursor:
                cursor.execute("CREATE TABLE t(x INTEGER)")
                cursor.execute("INSERT INTO t(x) VALUES (1)")
                cursor.execute("PRAGMA user_version=5")
            yield SQLITE_ALIAS, db_file
            connections[SQLITE_ALIAS].close()
        _refresh_connection_handler()
