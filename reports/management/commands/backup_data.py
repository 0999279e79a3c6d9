"""Write a JSON snapshot of the study database to the configured backup storage."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.exceptions import ServiceError
from reports.services.backup import create_backup, get_backup_storage


class Command(BaseCommand):
    help = "Back up all study data as homer_backup_YYYY-MM-DD.json."

    def add_arguments(self, parser):
        parser.add_argument(
            "--backend",
            dest="backend",
            choices=("file", "dropbox"),
            default=None,
            help="Override BACKUP_CONFIG['BACKEND'].",
        )

    def handle(self, *args, **options):
        try:
            path = create_backup(get_backup_storage(options.get("backend")))
        except ServiceError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS(f"Backup written to {path}."))
