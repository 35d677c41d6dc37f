from django.apps import AppConfig


class DjangoSqliteDumpConfig(AppConfig):
    name = "django_sqlite_dump"
    verbose_name = "Django SQLite Dump"
    default_auto_field = "django.db.models.BigAutoField"
