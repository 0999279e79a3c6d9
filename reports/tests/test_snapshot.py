import datetime
import json

from django.test import TestCase

from core.models import StudyEvent
from core.service.schedule import generate_study_events
from inventory.models import DeviceSet, SimCard
from inventory.service import device as device_service
from inventory.service import sim as sim_service
from monitoring.models import Reminder
from reports.services import snapshot
from reports.services.backup import dump_snapshot
from users import choices
from users.models import CustomUser, Patient


class SnapshotTests(TestCase):
    def setUp(self):
        self.user = CustomUser.objects.create_user(email="a@homer.org", password="secret123", first_name="A")
        self.patient = Patient.objects.create(
            patient_code="CTL-001",
            age=50,
            affected_hand=choices.AffectedHand.RIGHT,
            group_type=choices.GroupType.CONTROL,
            study_start_date=datetime.date(2024, 1, 15),
            enrollment_date=datetime.date(2024, 1, 10),
            created_by=self.user,
        )
        generate_study_events(self.patient, self.patient.study_start_date, self.patient.group_type)
        device = device_service.create_device_set({"mars_device_id": "M1", "pluto_device_id": "P1"})
        device_service.assign_device_set(device.pk, self.patient.pk)
        sim = sim_service.create_sim({"sim_number": "S1", "provider": "jio", "linked_device_set_id": device.pk})
        sim_service.recharge_sim(sim.pk, datetime.date(2024, 1, 1), 90, today=datetime.date(2024, 1, 1))

    def _json_roundtrip(self, data):
        return json.loads(dump_snapshot(data))

    def test_snapshot_shape(self):
        data = snapshot.build_snapshot()

        self.assertEqual(data["version"], "1.0.0")
        self.assertIn("exportedAt", data)
        for key, _label, _ordering in snapshot.SNAPSHOT_SECTIONS:
            self.assertIsInstance(data[key], list)
        self.assertEqual(len(data["patients"]), 1)
        self.assertEqual(data["patients"][0]["id"], self.patient.pk)
        self.assertEqual(data["patients"][0]["patient_code"], "CTL-001")
        self.assertEqual(len(data["studyEvents"]), 12)
        self.assertEqual(data["deviceSets"][0]["assigned_patient"], self.patient.pk)

    def test_replace_restores_everything(self):
        data = self._json_roundtrip(snapshot.build_snapshot())
        Patient.objects.filter(pk=self.patient.pk).update(name="Changed")
        extra = Patient.objects.create(
            patient_code="CTL-999",
            age=40,
            affected_hand=choices.AffectedHand.LEFT,
            group_type=choices.GroupType.CONTROL,
            study_start_date=datetime.date(2024, 2, 1),
            enrollment_date=datetime.date(2024, 2, 1),
        )

        result = snapshot.import_snapshot(data, mode="replace")

        self.assertEqual(result.errors, [])
        self.assertFalse(Patient.objects.filter(pk=extra.pk).exists())
        self.assertEqual(Patient.objects.get(pk=self.patient.pk).name, "")
        self.assertEqual(StudyEvent.objects.count(), 12)
        self.assertEqual(DeviceSet.objects.get().assigned_patient_id, self.patient.pk)
        self.assertEqual(SimCard.objects.get().expiry_date, datetime.date(2024, 3, 31))
        self.assertEqual(Reminder.objects.count(), 1)
        self.assertEqual(result.imported["patients"], 1)

    def test_merge_upserts_and_keeps_other_rows(self):
        data = self._json_roundtrip(snapshot.build_snapshot())
        data["patients"][0]["phone_number"] = "12345"
        other = Patient.objects.create(
            patient_code="CTL-002",
            age=40,
            affected_hand=choices.AffectedHand.LEFT,
            group_type=choices.GroupType.CONTROL,
            study_start_date=datetime.date(2024, 2, 1),
            enrollment_date=datetime.date(2024, 2, 1),
        )

        result = snapshot.import_snapshot(data)

        self.assertEqual(result.mode, "merge")
        self.assertEqual(Patient.objects.get(pk=self.patient.pk).phone_number, "12345")
        self.assertTrue(Patient.objects.filter(pk=other.pk).exists())

    def test_bad_records_are_collected(self):
        data = {
            "studyEvents": [
                {
                    "id": 987654,
                    "patient": 123456,
                    "event_name": "Orphan",
                    "event_type": "assessment",
                    "study_day": 0,
                    "scheduled_date": "2024-01-01",
                    "status": "pending",
                },
                "not a record",
            ],
            "patients": "oops",
        }

        result = snapshot.import_snapshot(data)

        self.assertEqual(result.total_imported, 0)
        self.assertEqual(len(result.errors), 3)
        tables = sorted(error["table"] for error in result.errors)
        self.assertEqual(tables, ["patients", "studyEvents", "studyEvents"])
        self.assertFalse(StudyEvent.objects.filter(pk=987654).exists())

    def test_missing_staff_user_is_nulled(self):
        data = self._json_roundtrip(snapshot.build_snapshot())
        data["patients"][0]["created_by"] = 424242

        result = snapshot.import_snapshot(data, mode="replace")

        self.assertEqual(result.errors, [])
        self.assertIsNone(Patient.objects.get(pk=self.patient.pk).created_by)

    def test_invalid_input(self):
        with self.assertRaises(snapshot.SnapshotError):
            snapshot.import_snapshot([], mode="merge")
        with self.assertRaises(snapshot.SnapshotError):
            snapshot.import_snapshot({}, mode="overwrite")
