import datetime

from django.test import TestCase

from core.service.schedule import generate_study_events
from inventory.service import device as device_service
from inventory.service import watch as watch_service
from monitoring.services.adverse_events import create_adverse_event
from reports.services import csv_export
from users import choices
from users.models import Patient
from users.services.patient import PatientNotFoundError


class CsvExportTests(TestCase):
    def setUp(self):
        self.patient = Patient.objects.create(
            patient_code="INT-001",
            age=61,
            affected_hand=choices.AffectedHand.LEFT,
            group_type=choices.GroupType.INTERVENTION,
            study_start_date=datetime.date(2024, 1, 15),
            enrollment_date=datetime.date(2024, 1, 10),
            phone_number="98450 00000",
        )
        generate_study_events(self.patient, self.patient.study_start_date, self.patient.group_type)

    def test_patients_csv(self):
        lines = csv_export.export_patients_csv().splitlines()

        self.assertEqual(lines[0].split(",")[0], "Patient ID")
        self.assertEqual(
            lines[1], "INT-001,61,left,intervention,,2024-01-15,2024-01-10,98450 00000,active"
        )

    def test_dropouts_csv_lists_adverse_event_dropouts(self):
        create_adverse_event(
            self.patient.pk,
            {
                "event_date": datetime.date(2024, 1, 20),
                "study_day": 5,
                "event_type": "Stroke recurrence",
                "severity": "severe",
                "description": "Admitted, with complications",
                "requires_dropout": True,
            },
        )

        dropouts = csv_export.export_dropouts_csv().splitlines()
        self.assertEqual(len(dropouts), 2)
        self.assertIn("2024-01-20,Adverse event: Stroke recurrence", dropouts[1])

        adverse = csv_export.export_adverse_events_csv().splitlines()
        # Embedded commas are quoted.
        self.assertTrue(adverse[1].endswith('"Admitted, with complications"'))

    def test_devices_csv_includes_worn_watch(self):
        device = device_service.create_device_set({"mars_device_id": "MARS-1", "pluto_device_id": "PLUTO-1"})
        device_service.assign_device_set(device.pk, self.patient.pk)
        watch = watch_service.create_watch({"name": "W1", "left_serial": "L-100", "right_serial": "R-100"})
        watch_service.assign_watch(watch.pk, self.patient.pk)

        lines = csv_export.export_devices_csv().splitlines()
        self.assertEqual(lines[1], "1,MARS-1,PLUTO-1,,,L-100,R-100,in_use,INT-001")

    def test_patient_report_sections(self):
        code, content = csv_export.export_patient_csv(self.patient.pk)

        self.assertEqual(code, "INT-001")
        for title in ("PATIENT DEMOGRAPHICS", "STUDY EVENTS", "INTERVENTION SESSIONS", "ADVERSE EVENTS", "ISSUE LOGS"):
            self.assertIn(title, content)
        self.assertNotIn("CONTROL SESSIONS", content)
        self.assertIn("-1,Baseline Assessment,assessment,2024-01-14,pending", content)

    def test_patient_report_unknown_patient(self):
        with self.assertRaises(PatientNotFoundError):
            csv_export.export_patient_csv(999999)
