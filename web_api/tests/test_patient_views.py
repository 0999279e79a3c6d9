import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from users import choices
from users.models import AuditLog, Patient

PATIENT_PAYLOAD = {
    "patient_code": "INT-001",
    "name": "Ravi",
    "age": 62,
    "affected_hand": "right",
    "group_type": "intervention",
    "study_start_date": "2024-01-15",
    "enrollment_date": "2024-01-10",
}


@pytest.mark.django_db
class TestPatientViews:
    def setup_method(self):
        User = get_user_model()
        self.therapist = User.objects.create_user(
            email="therapist@homer.org",
            password="password",
            first_name="Tara",
            role=choices.UserRole.THERAPIST,
        )
        self.clerk = User.objects.create_user(
            email="clerk@homer.org",
            password="password",
            first_name="Dev",
            role=choices.UserRole.DATA_ENTRY,
        )
        self.url = reverse("web_api:patients")

    def test_requires_login_returns_json(self, client):
        response = client.get(self.url)
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_data_entry_cannot_create(self, client):
        client.force_login(self.clerk)
        response = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json")
        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions"

    def test_create_patient_generates_schedule_and_audits(self, client):
        client.force_login(self.therapist)
        response = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json")

        assert response.status_code == 201
        payload = response.json()
        assert payload["success"] is True
        assert payload["data"]["patient_code"] == "INT-001"
        assert payload["data"]["schedule_status"] == "generated"
        assert "warning" not in payload

        patient = Patient.objects.get(patient_code="INT-001")
        assert patient.study_events.count() == 13
        log = AuditLog.objects.get()
        assert log.table_name == "patients"
        assert log.action == choices.AuditAction.CREATE
        assert log.record_id == str(patient.pk)

    def test_validation_errors_are_listed_per_field(self, client):
        client.force_login(self.therapist)
        response = client.post(
            self.url, {**PATIENT_PAYLOAD, "age": 12}, content_type="application/json"
        )
        assert response.status_code == 400
        payload = response.json()
        assert payload["message"] == "Validation failed"
        assert "age" in payload["errors"]

    def test_duplicate_code_conflicts(self, client):
        client.force_login(self.therapist)
        client.post(self.url, PATIENT_PAYLOAD, content_type="application/json")
        response = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json")
        assert response.status_code == 409

    def test_malformed_json(self, client):
        client.force_login(self.therapist)
        response = client.post(self.url, "{not json", content_type="application/json")
        assert response.status_code == 400
        assert response.json()["message"] == "Request body is not valid JSON"

    def test_list_is_paginated(self, client):
        client.force_login(self.clerk)
        for idx in range(3):
            Patient.objects.create(
                patient_code=f"CTL-00{idx + 1}",
                age=40,
                affected_hand="left",
                group_type="control",
                study_start_date="2024-01-15",
                enrollment_date="2024-01-10",
            )
        response = client.get(self.url, {"page": 2, "page_size": 2})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["pagination"]["total"] == 3
        assert len(data["items"]) == 1

    def test_invalid_page_param(self, client):
        client.force_login(self.clerk)
        response = client.get(self.url, {"page": "0"})
        assert response.status_code == 400

    def test_next_id(self, client):
        client.force_login(self.clerk)
        response = client.get(reverse("web_api:patient_next_id"), {"group_type": "control"})
        assert response.json()["data"]["patient_code"] == "CTL-001"
        response = client.get(reverse("web_api:patient_next_id"), {"group_type": "nope"})
        assert response.status_code == 400

    def test_dropout_then_timeline(self, client):
        client.force_login(self.therapist)
        patient_id = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json").json()["data"]["id"]

        response = client.post(
            reverse("web_api:patient_dropout", args=[patient_id]),
            {"dropout_date": "2024-01-22", "dropout_reason": "Moved", "dropout_reason_type": "Withdrawal"},
            content_type="application/json",
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "dropped_out"
        assert response.json()["cancelled_events"] == 7

        again = client.post(
            reverse("web_api:patient_dropout", args=[patient_id]),
            {"dropout_date": "2024-01-23", "dropout_reason": "x", "dropout_reason_type": "y"},
            content_type="application/json",
        )
        assert again.status_code == 409

        timeline = client.get(reverse("web_api:patient_timeline", args=[patient_id])).json()["data"]
        assert [event["study_day"] for event in timeline][:2] == [-1, 0]
        assert timeline[-1]["status"] == "cancelled"

    def test_partial_update(self, client):
        client.force_login(self.therapist)
        patient_id = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json").json()["data"]["id"]

        response = client.put(
            reverse("web_api:patient_detail", args=[patient_id]),
            {"phone_number": "+91 99999 00000"},
            content_type="application/json",
        )
        assert response.status_code == 200
        assert response.json()["data"]["phone_number"] == "+91 99999 00000"
        assert response.json()["data"]["age"] == 62

    def test_missing_patient(self, client):
        client.force_login(self.clerk)
        response = client.get(reverse("web_api:patient_detail", args=[999999]))
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Patient not found"}

    def test_delete_requires_writer(self, client):
        client.force_login(self.therapist)
        patient_id = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json").json()["data"]["id"]
        detail_url = reverse("web_api:patient_detail", args=[patient_id])

        client.force_login(self.clerk)
        assert client.delete(detail_url).status_code == 403

        client.force_login(self.therapist)
        response = client.delete(detail_url)
        assert response.status_code == 200
        assert not Patient.objects.filter(pk=patient_id).exists()

    def test_partial_update_rejects_blank_required_fields(self, client):
        client.force_login(self.therapist)
        patient_id = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json").json()["data"]["id"]
        detail_url = reverse("web_api:patient_detail", args=[patient_id])

        for field in ("patient_code", "age", "study_start_date"):
            for value in (None, ""):
                response = client.put(detail_url, {field: value}, content_type="application/json")
                assert response.status_code == 400, (field, value)
                assert field in response.json()["errors"]

        patient = Patient.objects.get(pk=patient_id)
        assert patient.patient_code == "INT-001"
        assert patient.age == 62
        assert patient.study_start_date.isoformat() == "2024-01-15"

    def test_vcg_assignment_rejected_for_intervention_patient(self, client):
        client.force_login(self.therapist)
        patient_id = client.post(self.url, PATIENT_PAYLOAD, content_type="application/json").json()["data"]["id"]

        response = client.put(
            reverse("web_api:patient_detail", args=[patient_id]),
            {"vcg_assignment": "VCG2"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert "vcg_assignment" in response.json()["errors"]
        assert Patient.objects.get(pk=patient_id).vcg_assignment == ""
