from __future__ import annotations

from django.conf import settings as django_settings
from django.core.management.base import BaseCommand, CommandError, CommandParser

from django_sqlite_dump.db.registry import get_connector
from django_sqlite_dump.exceptions import ConnectorNotFound
from django_sqlite_dump.filenames import find_dumps


class Command(BaseCommand):
    help = "List the dump files kept next to a SQLite database."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "-d",
            "--database",
            default="default",
            help="Database alias (default: 'default').",
        )

    def handle(self, *args: object, **options: object) -> None:
        database = str(options["database"])

        if database not in django_settings.DATABASES:
            raise CommandError(f"Database '{database}' is not configured.")
        try:
            connector = get_connector(database)
        except ConnectorNotFound as exc:
            raise CommandError(str(exc)) from exc
        db_file = connector.resolve_file()
        if db_file is None:
            raise CommandError(f"Database '{database}' is not backed by a file.")

        dumps = find_dumps(db_file)
        if not dumps:
            self.stdout.write("No dumps found.")
            return

        self.stdout.write(f"{'Name':<50} {'Version':>8} {'Timestamp':<16} {'Size':>12}")
        self.stdout.write("-" * 89)
        for artifact in dumps:
            version = "" if artifact.version is None else str(artifact.version)
            size = self._format_size(artifact.path.stat().st_size)
            self.stdout.write(f"{artifact.path.name:<50} {version:>8} {artifact.timestamp or '':<16} {size:>12}")

    @staticmethod
    def _format_size(size: int) -> str:
        for unit in ("B", "KB", "MB", "GB", "TB"):
            if size < 1024:
                return f"{size:.1f} {unit}" if unit != "B" else f"{size} {unit}"
            size /= 1024  # type: ignore[assignment]
        return f"{size:.1f} PB"
