# core/management/commands/wait_for_db.py

"""
PATH: core/management/commands/wait_for_db.py

Block until the database accepts connections (exponential backoff).
Intended for container entrypoints before `migrate` / server start.
"""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.db import DatabaseUnavailableError, wait_for_database


class Command(BaseCommand):
    help = "Wait for the database to become available (bounded exponential backoff)."

    def add_arguments(self, parser):
        parser.add_argument("--database", default="default")
        parser.add_argument("--attempts", type=int, default=None)
        parser.add_argument("--delay", type=float, default=None, help="Initial backoff delay in seconds.")

    def handle(self, *args, **options):
        try:
            used = wait_for_database(
                alias=options["database"],
                max_attempts=options["attempts"],
                base_delay=options["delay"],
            )
        except DatabaseUnavailableError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(f"Database available (attempts: {used})."))
