from datetime import date

from django.test import TestCase

from core.models import ControlSession, InterventionSession, PatientExercise
from core.service import exercise as exercise_service
from core.service import sessions as session_service
from users import choices as user_choices
from users.models import Patient


def _patient(code, group_type):
    return Patient.objects.create(
        patient_code=code,
        age=48,
        affected_hand=user_choices.AffectedHand.LEFT,
        group_type=group_type,
        study_start_date=date(2024, 1, 15),
        enrollment_date=date(2024, 1, 10),
    )


class SessionServiceTests(TestCase):
    def setUp(self):
        self.intervention = _patient("INT-001", user_choices.GroupType.INTERVENTION)
        self.control = _patient("CTL-001", user_choices.GroupType.CONTROL)

    def test_log_intervention_session(self):
        session = session_service.log_session(
            user_choices.GroupType.INTERVENTION,
            self.intervention.pk,
            {"session_date": date(2024, 1, 16), "study_day": 1, "robotic_assessment_score": 42.5},
        )
        self.assertIsInstance(session, InterventionSession)
        self.assertEqual(
            session_service.list_sessions(user_choices.GroupType.INTERVENTION, self.intervention.pk), [session]
        )

    def test_arm_mismatch_writes_nothing(self):
        with self.assertRaisesMessage(session_service.SessionGroupMismatchError, "control group"):
            session_service.log_session(
                user_choices.GroupType.CONTROL,
                self.intervention.pk,
                {"session_date": date(2024, 1, 16), "study_day": 1},
            )
        self.assertEqual(ControlSession.objects.count(), 0)

    def test_unknown_patient(self):
        with self.assertRaises(session_service.NotFoundError):
            session_service.log_session(
                user_choices.GroupType.CONTROL, 999999, {"session_date": date(2024, 1, 16), "study_day": 1}
            )

    def test_update_and_delete(self):
        session = session_service.log_session(
            user_choices.GroupType.CONTROL,
            self.control.pk,
            {"session_date": date(2024, 1, 16), "study_day": 1},
        )
        updated = session_service.update_session(
            user_choices.GroupType.CONTROL, session.pk, {"manual_exercises_given": "Finger taps"}
        )
        self.assertEqual(updated.manual_exercises_given, "Finger taps")

        session_service.delete_session(user_choices.GroupType.CONTROL, session.pk)
        with self.assertRaises(session_service.SessionNotFoundError):
            session_service.delete_session(user_choices.GroupType.CONTROL, session.pk)


class ExerciseServiceTests(TestCase):
    def setUp(self):
        self.patient = _patient("INT-002", user_choices.GroupType.INTERVENTION)

    def _prescribe(self, study_day):
        return exercise_service.prescribe_exercise(
            self.patient.pk,
            {"group_type": user_choices.GroupType.INTERVENTION, "study_day": study_day, "mars_mechanisms": "M1"},
        )

    def test_only_latest_prescription_is_current(self):
        first = self._prescribe(1)
        second = self._prescribe(7)

        first.refresh_from_db()
        self.assertFalse(first.is_current)
        self.assertTrue(second.is_current)
        self.assertEqual(exercise_service.get_current_exercise(self.patient.pk), second)
        self.assertEqual(PatientExercise.objects.filter(patient=self.patient, is_current=True).count(), 1)

    def test_revise_issues_a_new_current_row(self):
        first = self._prescribe(1)

        revised = exercise_service.revise_exercise(
            first.pk, {"group_type": user_choices.GroupType.INTERVENTION, "study_day": 3}
        )

        self.assertNotEqual(revised.pk, first.pk)
        self.assertTrue(revised.is_current)
        self.assertEqual(len(exercise_service.list_exercises(self.patient.pk)), 2)

    def test_delete_missing_exercise(self):
        with self.assertRaises(exercise_service.ExerciseNotFoundError):
            exercise_service.delete_exercise(999999)
