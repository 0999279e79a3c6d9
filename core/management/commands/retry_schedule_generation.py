"""Retry study schedule generation for patients whose first attempt failed."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from core.service.schedule import retry_failed_schedules
from users.models import Patient


class Command(BaseCommand):
    help = "Regenerate study events for patients with a failed schedule."

    def add_arguments(self, parser):
        parser.add_argument(
            "--patient",
            dest="patient_code",
            default=None,
            help="Only retry this patient code, whatever its schedule status.",
        )

    def handle(self, *args, **options):
        patient_code = options.get("patient_code")
        patients = None
        if patient_code:
            patients = list(Patient.objects.filter(patient_code=patient_code))
            if not patients:
                raise CommandError(f"Unknown patient code: {patient_code}")

        succeeded, failed = retry_failed_schedules(patients)
        self.stdout.write(
            self.style.SUCCESS(f"Schedules generated for {succeeded} patient(s), {failed} still failing.")
        )
