import datetime
import io

from django.core.management import CommandError, call_command
from django.test import TestCase

from core.tasks import retry_failed_schedules_task
from users import choices
from users.models import Patient


class RetryScheduleTests(TestCase):
    def setUp(self):
        self.patient = Patient.objects.create(
            patient_code="CTL-004",
            age=45,
            affected_hand=choices.AffectedHand.RIGHT,
            group_type=choices.GroupType.CONTROL,
            study_start_date=datetime.date(2024, 1, 15),
            enrollment_date=datetime.date(2024, 1, 10),
            schedule_status=choices.ScheduleStatus.FAILED,
            schedule_error="timeout",
        )

    def test_command_for_one_patient(self):
        out = io.StringIO()
        call_command("retry_schedule_generation", "--patient", "CTL-004", stdout=out)

        self.patient.refresh_from_db()
        self.assertEqual(self.patient.schedule_status, choices.ScheduleStatus.GENERATED)
        self.assertEqual(self.patient.study_events.count(), 12)
        self.assertIn("1 patient(s)", out.getvalue())

    def test_command_unknown_patient(self):
        with self.assertRaises(CommandError):
            call_command("retry_schedule_generation", "--patient", "CTL-999", stdout=io.StringIO())

    def test_task_retries_failed_patients(self):
        self.assertEqual(retry_failed_schedules_task(), {"succeeded": 1, "failed": 0})
        self.assertEqual(retry_failed_schedules_task(), {"succeeded": 0, "failed": 0})
