import datetime

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from core.models import StudyEvent
from core.service.schedule import generate_study_events
from monitoring.models import Reminder
from users import choices
from users.models import Patient


@pytest.mark.django_db
class TestClinicalViews:
    def setup_method(self):
        User = get_user_model()
        self.therapist = User.objects.create_user(
            email="therapist@homer.org", password="password", first_name="Tara", role=choices.UserRole.THERAPIST
        )
        self.clerk = User.objects.create_user(
            email="clerk@homer.org", password="password", first_name="Dev", role=choices.UserRole.DATA_ENTRY
        )
        self.patient = Patient.objects.create(
            patient_code="CTL-001",
            age=52,
            affected_hand="right",
            group_type="control",
            study_start_date=datetime.date(2024, 1, 15),
            enrollment_date=datetime.date(2024, 1, 10),
        )
        generate_study_events(self.patient, self.patient.study_start_date, self.patient.group_type)

    def test_session_arm_must_match(self, client):
        client.force_login(self.therapist)
        body = {"patient_id": self.patient.pk, "session_date": "2024-01-16", "study_day": 1}

        response = client.post(reverse("web_api:intervention_sessions"), body, content_type="application/json")
        assert response.status_code == 409
        assert response.json()["message"] == "Patient is not in intervention group"

        response = client.post(
            reverse("web_api:control_sessions"),
            {**body, "manual_exercises_given": "Grip ball"},
            content_type="application/json",
        )
        assert response.status_code == 201

        listed = client.get(reverse("web_api:control_sessions_for_patient", args=[self.patient.pk]))
        assert [item["manual_exercises_given"] for item in listed.json()["data"]] == ["Grip ball"]

    def test_data_entry_is_read_only(self, client):
        client.force_login(self.clerk)
        response = client.post(
            reverse("web_api:adverse_events"),
            {"patient_id": self.patient.pk},
            content_type="application/json",
        )
        assert response.status_code == 403
        assert client.get(reverse("web_api:adverse_events")).status_code == 200

    def test_adverse_event_with_dropout(self, client):
        client.force_login(self.therapist)
        response = client.post(
            reverse("web_api:adverse_events"),
            {
                "patient_id": self.patient.pk,
                "event_date": "2024-01-22",
                "study_day": 7,
                "event_type": "Fall",
                "severity": "severe",
                "requires_dropout": True,
            },
            content_type="application/json",
        )
        assert response.status_code == 201
        self.patient.refresh_from_db()
        assert self.patient.status == "dropped_out"
        assert self.patient.dropout_reason == "Adverse event: Fall"

    def test_issue_follow_up_reminder_listed(self, client):
        client.force_login(self.therapist)
        response = client.post(
            reverse("web_api:issues"),
            {
                "patient_id": self.patient.pk,
                "contact_date": "2024-01-20",
                "contact_type": "phone",
                "issue_type": "technical",
                "follow_up_required": True,
                "follow_up_date": "2099-01-01",
            },
            content_type="application/json",
        )
        assert response.status_code == 201

        reminders = client.get(reverse("web_api:reminders"), {"reminder_type": "follow_up"}).json()["data"]
        assert len(reminders) == 1
        assert reminders[0]["title"] == "Follow-up Required"
        assert reminders[0]["related_id"] == response.json()["data"]["id"]

        done = client.put(reverse("web_api:reminder_complete", args=[reminders[0]["id"]]))
        assert done.json()["data"]["is_completed"] is True
        assert Reminder.objects.filter(is_completed=False).count() == 0

    def test_complete_event(self, client):
        client.force_login(self.therapist)
        event = StudyEvent.objects.get(patient=self.patient, study_day=0)

        response = client.put(
            reverse("web_api:event_detail", args=[event.pk]),
            {"status": "completed", "completion_date": "2024-01-15", "notes": "Baseline done"},
            content_type="application/json",
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "completed"
        assert data["completion_date"] == "2024-01-15"

        response = client.put(reverse("web_api:event_cancel", args=[event.pk]))
        assert response.status_code == 409

    def test_event_list_filters(self, client):
        client.force_login(self.clerk)
        response = client.get(reverse("web_api:events"), {"patient_id": self.patient.pk, "page_size": 5})
        data = response.json()["data"]
        assert data["pagination"]["total"] == 12
        assert len(data["items"]) == 5
        assert data["items"][0]["patient"]["patient_code"] == "CTL-001"

    def test_exercise_prescription_flow(self, client):
        client.force_login(self.therapist)
        body = {"patient_id": self.patient.pk, "group_type": "control", "study_day": 1, "control_exercises": "A"}
        first = client.post(reverse("web_api:exercises"), body, content_type="application/json").json()["data"]

        revised = client.put(
            reverse("web_api:exercise_detail", args=[first["id"]]),
            {**body, "control_exercises": "B"},
            content_type="application/json",
        )
        assert revised.status_code == 201

        listed = client.get(reverse("web_api:exercises_for_patient", args=[self.patient.pk])).json()["data"]
        assert [(item["control_exercises"], item["is_current"]) for item in listed] == [("B", True), ("A", False)]
