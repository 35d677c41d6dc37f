from copy import deepcopy

from django.conf import settings

DEFAULTS: dict[str, object] = {
    # Tool
    "SQLITE_BINARY": "sqlite3",
    # Dump artifacts
    "DUMP_DATE_FORMAT": "%Y%m%d-%H%M",
    "FOREIGN_KEYS_WINDOW": 1024,
    # Connectors
    "CONNECTORS": {},
    "CONNECTOR_MAPPING": {},
}


def get_setting(key: str) -> object:
    """Get a django-sqlite-dump setting, falling back to defaults."""
    user_settings: dict[str, object] = getattr(settings, "DJANGO_SQLITE_DUMP", {})
    if key in user_settings:
        value = user_settings[key]
        return deepcopy(value) if isinstance(value, (dict, list, set)) else value
    if key in DEFAULTS:
        value = DEFAULTS[key]
        return deepcopy(value) if isinstance(value, (dict, list, set)) else value
    msg = f"Unknown django-sqlite-dump setting: {key}"
    raise KeyError(msg)
