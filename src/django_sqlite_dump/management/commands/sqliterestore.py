from __future__ import annotations

from pathlib import Path

from django.conf import settings as django_settings
from django.core.management.base import BaseCommand, CommandError, CommandParser

from django_sqlite_dump.db.base import BaseConnector
from django_sqlite_dump.db.registry import get_connector
from django_sqlite_dump.exceptions import ConnectorNotFound, DjangoSqliteDumpError
from django_sqlite_dump.filenames import find_dumps
from django_sqlite_dump.signals import post_restore, pre_restore
from django_sqlite_dump.snapshot import restore


class Command(BaseCommand):
    help = "Restore a SQLite database from a SQL dump, backing up the current state first."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "-d",
            "--database",
            default="",
            help="Database alias to restore. Required when multiple databases are configured.",
        )
        parser.add_argument(
            "-i",
            "--input-path",
            default="",
            help="Dump file to restore (relative to the database directory). If empty, uses the latest.",
        )
        parser.add_argument(
            "--noinput",
            action="store_false",
            dest="interactive",
            default=True,
            help="Do not prompt for confirmation before restoring.",
        )

    def handle(self, *args: object, **options: object) -> None:
        database = str(options["database"])
        input_path = str(options["input_path"])
        interactive = bool(options["interactive"])
        verbosity = int(options["verbosity"])  # type: ignore[arg-type]

        if not database:
            if len(django_settings.DATABASES) > 1:
                raise CommandError(
                    "Multiple databases are configured. Please specify which one to restore with --database."
                )
            database = next(iter(django_settings.DATABASES))
        elif database not in django_settings.DATABASES:
            raise CommandError(f"Database '{database}' is not configured.")

        try:
            connector = get_connector(database)
        except ConnectorNotFound as exc:
            raise CommandError(str(exc)) from exc
        db_file = connector.resolve_file()
        if db_file is None:
            raise CommandError(f"Database '{database}' is not backed by a file and cannot be restored.")

        dump_file = self._resolve_input(db_file, input_path) if input_path else self._find_latest(db_file, database)

        if interactive:
            answer = input(f"Restore database '{database}' from '{dump_file}'? [y/N] ").strip().lower()
            if answer not in {"y", "yes"}:
                self.stdout.write("Restore cancelled.")
                raise SystemExit(0)

        pre_restore.send(sender=self.__class__, database=database, path=dump_file)

        if verbosity >= 1:
            self.stdout.write(f"Restoring database '{database}' from {dump_file}")

        backup = self._restore(connector, dump_file)

        post_restore.send(sender=self.__class__, database=database, path=dump_file, backup=backup)

        if verbosity >= 1:
            self.stdout.write(f"Previous state saved to: {backup}")
            self.stdout.write(self.style.SUCCESS(f"Restore completed from: {dump_file}"))

    def _restore(self, connector: BaseConnector, dump_file: Path) -> Path | None:
        try:
            return restore(connector, dump_file)
        except (DjangoSqliteDumpError, FileNotFoundError) as exc:
            self.stderr.write(f"Database restore failed: {exc}")
            raise SystemExit(1) from exc

    def _find_latest(self, db_file: Path, database: str) -> Path:
        dumps = [artifact for artifact in find_dumps(db_file) if artifact.is_sql]
        if not dumps:
            self.stderr.write(f"No dumps found for database '{database}'")
            raise SystemExit(1)
        return dumps[0].path

    @staticmethod
    def _resolve_input(db_file: Path, input_path: str) -> Path:
        path = Path(input_path)
        if not path.is_absolute():
            path = db_file.parent / path
        if not path.is_file():
            raise CommandError(f"Dump file '{path}' does not exist.")
        return path
