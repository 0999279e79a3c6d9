from datetime import date
from unittest import mock

from django.test import TestCase

from core.models import StudyEvent, choices
from core.service import schedule
from users import choices as user_choices
from users.models import Patient


def _patient(**overrides):
    data = {
        "patient_code": "INT-001",
        "age": 55,
        "affected_hand": user_choices.AffectedHand.LEFT,
        "group_type": user_choices.GroupType.INTERVENTION,
        "study_start_date": date(2024, 1, 15),
        "enrollment_date": date(2024, 1, 10),
    }
    data.update(overrides)
    return Patient.objects.create(**data)


class BuildScheduleTests(TestCase):
    def test_intervention_without_a0(self):
        planned = schedule.build_schedule(date(2024, 1, 15), user_choices.GroupType.INTERVENTION)

        self.assertEqual(len(planned), 13)
        self.assertEqual(
            [item.study_day for item in planned],
            [-1, 0, 1, 2, 3, 7, 14, 15, 21, 28, 29, 30, 180],
        )
        by_day = {item.study_day: item for item in planned}
        self.assertEqual(by_day[-1].event_name, "Baseline Assessment")
        self.assertEqual(by_day[-1].scheduled_date, date(2024, 1, 14))
        self.assertEqual(by_day[0].scheduled_date, date(2024, 1, 15))
        self.assertEqual(by_day[15].scheduled_date, date(2024, 1, 30))
        self.assertEqual(by_day[30].scheduled_date, date(2024, 2, 14))
        self.assertEqual(by_day[180].scheduled_date, date(2024, 7, 13))

    def test_intervention_baseline_uses_a0(self):
        planned = schedule.build_schedule(
            date(2024, 1, 15), user_choices.GroupType.INTERVENTION, a0_date=date(2024, 1, 5)
        )
        by_day = {item.study_day: item for item in planned}

        self.assertEqual(by_day[-1].scheduled_date, date(2024, 1, 5))
        # Day 30 ignores A0, day 180 follows it.
        self.assertEqual(by_day[30].scheduled_date, date(2024, 2, 14))
        self.assertEqual(by_day[180].scheduled_date, date(2024, 7, 3))

    def test_control_with_a0(self):
        planned = schedule.build_schedule(
            date(2024, 1, 15), user_choices.GroupType.CONTROL, a0_date=date(2024, 1, 10)
        )

        self.assertEqual(len(planned), 12)
        self.assertEqual(planned[0].study_day, 0)
        self.assertEqual(planned[0].event_type, choices.EventType.ASSESSMENT)
        self.assertEqual(planned[0].scheduled_date, date(2024, 1, 10))
        self.assertEqual(planned[-1].study_day, 180)
        self.assertEqual(planned[-1].scheduled_date, date(2024, 7, 8))
        names = [item.event_name for item in planned]
        self.assertIn("Watch Swap Visit", names)
        self.assertNotIn("Device Installation", names)

    def test_control_baseline_without_a0_is_study_start(self):
        planned = schedule.build_schedule(date(2024, 3, 1), user_choices.GroupType.CONTROL)
        self.assertEqual(planned[0].scheduled_date, date(2024, 3, 1))

    def test_unknown_group_is_rejected(self):
        with self.assertRaises(ValueError):
            schedule.build_schedule(date(2024, 1, 15), "placebo")


class GenerateAndRegenerateTests(TestCase):
    def setUp(self):
        self.patient = _patient()

    def test_generate_creates_pending_rows(self):
        created = schedule.generate_study_events(
            self.patient, self.patient.study_start_date, self.patient.group_type
        )

        self.assertEqual(len(created), 13)
        self.assertFalse(
            StudyEvent.objects.filter(patient=self.patient).exclude(status=choices.EventStatus.PENDING).exists()
        )

    def test_regenerate_keeps_non_pending_events(self):
        schedule.generate_study_events(self.patient, self.patient.study_start_date, self.patient.group_type)
        baseline = StudyEvent.objects.get(patient=self.patient, study_day=-1)
        baseline.status = choices.EventStatus.COMPLETED
        baseline.completion_date = date(2024, 1, 14)
        baseline.save()

        schedule.regenerate_study_events(
            self.patient, date(2024, 2, 1), self.patient.group_type, self.patient.a0_date
        )

        baseline.refresh_from_db()
        self.assertEqual(baseline.status, choices.EventStatus.COMPLETED)
        self.assertEqual(baseline.scheduled_date, date(2024, 1, 14))
        pending = StudyEvent.objects.filter(patient=self.patient, status=choices.EventStatus.PENDING)
        self.assertEqual(pending.count(), 13)
        self.assertEqual(pending.get(study_day=0).scheduled_date, date(2024, 2, 1))

    def test_cancel_future_events_is_strictly_after_cutoff(self):
        schedule.generate_study_events(self.patient, self.patient.study_start_date, self.patient.group_type)
        done = StudyEvent.objects.get(patient=self.patient, study_day=1)
        done.status = choices.EventStatus.COMPLETED
        done.save()

        cancelled = schedule.cancel_future_events(self.patient, date(2024, 1, 22))

        # Days 14 .. 180 are after the cutoff; day 7 falls on it.
        self.assertEqual(cancelled, 7)
        self.assertEqual(
            StudyEvent.objects.get(patient=self.patient, study_day=7).status, choices.EventStatus.PENDING
        )
        self.assertEqual(
            StudyEvent.objects.get(patient=self.patient, study_day=1).status, choices.EventStatus.COMPLETED
        )
        self.assertEqual(
            StudyEvent.objects.get(patient=self.patient, study_day=180).status, choices.EventStatus.CANCELLED
        )


class BestEffortGenerationTests(TestCase):
    def test_success_marks_patient_generated(self):
        patient = _patient()

        self.assertTrue(schedule.generate_schedule_best_effort(patient))

        patient.refresh_from_db()
        self.assertEqual(patient.schedule_status, user_choices.ScheduleStatus.GENERATED)
        self.assertEqual(patient.study_events.count(), 13)

    def test_failure_is_recorded_and_retryable(self):
        patient = _patient()

        with mock.patch.object(schedule, "generate_study_events", side_effect=RuntimeError("db down")):
            self.assertFalse(schedule.generate_schedule_best_effort(patient))

        patient.refresh_from_db()
        self.assertEqual(patient.schedule_status, user_choices.ScheduleStatus.FAILED)
        self.assertIn("db down", patient.schedule_error)
        self.assertEqual(patient.study_events.count(), 0)

        succeeded, failed = schedule.retry_failed_schedules()

        self.assertEqual((succeeded, failed), (1, 0))
        patient.refresh_from_db()
        self.assertEqual(patient.schedule_status, user_choices.ScheduleStatus.GENERATED)
        self.assertEqual(patient.study_events.count(), 13)


class StudyDayTests(TestCase):
    def test_study_day_is_clamped(self):
        self.assertEqual(schedule.get_study_day(date(2024, 1, 15), today=date(2024, 1, 10)), 0)
        self.assertEqual(schedule.get_study_day(date(2024, 1, 15), today=date(2024, 1, 25)), 10)
