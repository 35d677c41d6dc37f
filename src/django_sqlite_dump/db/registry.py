from __future__ import annotations

from typing import Any

from django.conf import settings as django_settings

from ..exceptions import ConnectorNotFound
from ..settings import get_setting
from .base import BaseConnector

DEFAULT_CONNECTOR_MAPPING: dict[str, str] = {
    # SQLite
    "django.db.backends.sqlite3": "django_sqlite_dump.db.sqlite.DjangoSqliteConnector",
    # SpatiaLite
    "django.contrib.gis.db.backends.spatialite": "django_sqlite_dump.db.sqlite.DjangoSqliteConnector",
    # django-prometheus wrapper
    "django_prometheus.db.backends.sqlite3": "django_sqlite_dump.db.sqlite.DjangoSqliteConnector",
}


def _import_connector(dotted_path: str) -> type[BaseConnector]:
    module_path, class_name = dotted_path.rsplit(".", 1)
    import importlib

    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def get_connector(database: str = "default") -> BaseConnector:
    """Get a connector instance for the given database alias."""
    db_settings: dict[str, Any] = django_settings.DATABASES[database]
    engine: str = db_settings["ENGINE"]

    # Check for per-database connector overrides
    connectors: dict[str, str] = get_setting("CONNECTORS")  # type: ignore[assignment]
    if database in connectors:
        cls = _import_connector(connectors[database])
        return cls(database)  # type: ignore[call-arg]

    # Check for engine→connector mapping overrides
    mapping: dict[str, str] = get_setting("CONNECTOR_MAPPING")  # type: ignore[assignment]
    merged = {**DEFAULT_CONNECTOR_MAPPING, **mapping}

    if engine not in merged:
        raise ConnectorNotFound(engine)

    cls = _import_connector(merged[engine])
    return cls(database)  # type: ignore[call-arg]
