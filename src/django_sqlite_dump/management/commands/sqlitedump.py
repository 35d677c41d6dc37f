from __future__ import annotations

from django.conf import settings as django_settings
from django.core.management.base import BaseCommand, CommandError, CommandParser

from django_sqlite_dump.db.registry import get_connector
from django_sqlite_dump.exceptions import ConnectorNotFound, DjangoSqliteDumpError
from django_sqlite_dump.signals import post_dump, pre_dump
from django_sqlite_dump.snapshot import dump


class Command(BaseCommand):
    help = "Dump a SQLite database to a SQL file next to the database file."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "-d",
            "--database",
            default="default",
            help="Database alias to dump (default: 'default').",
        )
        parser.add_argument(
            "--versioned",
            action="store_true",
            help="Add the schema version and a timestamp to the dump filename.",
        )

    def handle(self, *args: object, **options: object) -> None:
        database = str(options["database"])
        versioned = bool(options["versioned"])
        verbosity = int(options["verbosity"])  # type: ignore[arg-type]

        if database not in django_settings.DATABASES:
            raise CommandError(f"Database '{database}' is not configured.")
        try:
            connector = get_connector(database)
        except ConnectorNotFound as exc:
            raise CommandError(str(exc)) from exc

        pre_dump.send(sender=self.__class__, database=database)

        if verbosity >= 1:
            self.stdout.write(f"Dumping database '{database}'")

        try:
            path = dump(connector, version_qualified=versioned)
        except DjangoSqliteDumpError as exc:
            self.stderr.write(f"Database dump failed: {exc}")
            raise SystemExit(1) from exc

        post_dump.send(sender=self.__class__, database=database, path=path)

        if verbosity >= 2:
            for table in connector.list_tables():
                self.stdout.write(f"  {table}")
        if verbosity >= 1:
            self.stdout.write(self.style.SUCCESS(f"Dump completed: {path}"))
