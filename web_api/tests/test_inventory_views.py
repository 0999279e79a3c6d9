import datetime

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from inventory.models import DeviceSet
from users import choices
from users.models import AuditLog, Patient


@pytest.mark.django_db
class TestInventoryViews:
    def setup_method(self):
        User = get_user_model()
        self.admin = User.objects.create_user(
            email="admin@homer.org", password="password", first_name="Ada", role=choices.UserRole.ADMIN
        )
        self.therapist = User.objects.create_user(
            email="therapist@homer.org", password="password", first_name="Tara", role=choices.UserRole.THERAPIST
        )
        self.patient = Patient.objects.create(
            patient_code="INT-001",
            age=55,
            affected_hand="left",
            group_type="intervention",
            study_start_date=datetime.date(2024, 1, 15),
            enrollment_date=datetime.date(2024, 1, 10),
        )

    def _create_device(self, client, **payload):
        body = {"mars_device_id": "MARS-1", "pluto_device_id": "PLUTO-1", **payload}
        return client.post(reverse("web_api:devices"), body, content_type="application/json")

    def test_only_admin_registers_devices(self, client):
        client.force_login(self.therapist)
        assert self._create_device(client).status_code == 403

        client.force_login(self.admin)
        response = self._create_device(client)
        assert response.status_code == 201
        assert response.json()["data"]["set_number"] == 1
        assert response.json()["data"]["status"] == "available"

    def test_assign_return_cycle(self, client):
        client.force_login(self.admin)
        device_id = self._create_device(client).json()["data"]["id"]

        client.force_login(self.therapist)
        assign_url = reverse("web_api:device_assign", args=[device_id])
        response = client.post(assign_url, {"patient_id": self.patient.pk}, content_type="application/json")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "in_use"
        assert data["assigned_patient"]["patient_code"] == "INT-001"

        again = client.post(assign_url, {"patient_id": self.patient.pk}, content_type="application/json")
        assert again.status_code == 409

        response = client.post(reverse("web_api:device_return", args=[device_id]))
        assert response.json()["data"]["status"] == "available"
        assert response.json()["data"]["assigned_patient"] is None

        audited = AuditLog.objects.filter(table_name="devices").values_list("record_id", flat=True)
        assert set(audited) == {str(device_id)}

    def test_partial_update_rejects_blank_identifiers(self, client):
        client.force_login(self.admin)
        device_id = self._create_device(client).json()["data"]["id"]
        detail_url = reverse("web_api:device_detail", args=[device_id])

        for field in ("set_number", "mars_device_id"):
            for value in (None, ""):
                response = client.put(detail_url, {field: value}, content_type="application/json")
                assert response.status_code == 400, (field, value)
                assert field in response.json()["errors"]

        device = DeviceSet.objects.get(pk=device_id)
        assert device.set_number == 1
        assert device.mars_device_id == "MARS-1"

        response = client.put(detail_url, {"notes": "spare cable"}, content_type="application/json")
        assert response.status_code == 200
        assert response.json()["data"]["mars_device_id"] == "MARS-1"

    def test_duplicate_device_id_conflicts(self, client):
        client.force_login(self.admin)
        self._create_device(client)
        response = self._create_device(client, pluto_device_id="PLUTO-2")
        assert response.status_code == 409
        assert response.json()["message"] == "MARS Device ID already exists"
        assert DeviceSet.objects.count() == 1

    def test_watch_swap_pool_exhausted(self, client):
        client.force_login(self.therapist)
        watch = client.post(
            reverse("web_api:watches"),
            {"name": "W1", "left_serial": "L1", "right_serial": "R1"},
            content_type="application/json",
        ).json()["data"]
        client.post(
            reverse("web_api:watch_assign", args=[watch["id"]]),
            {"patient_id": self.patient.pk},
            content_type="application/json",
        )

        response = client.post(reverse("web_api:watch_swap", args=[watch["id"]]))
        assert response.status_code == 409
        assert response.json()["message"] == "No backup watch available for swap"

        client.post(
            reverse("web_api:watches"),
            {"name": "B1", "left_serial": "L2", "right_serial": "R2", "is_backup": True},
            content_type="application/json",
        )
        response = client.post(reverse("web_api:watch_swap", args=[watch["id"]]))
        assert response.status_code == 200
        assert response.json()["data"]["new_watch"]["name"] == "B1"
        assert response.json()["data"]["old_watch"]["is_backup"] is True

    def test_sim_recharge(self, client):
        client.force_login(self.admin)
        sim = client.post(
            reverse("web_api:sims"),
            {"sim_number": "899100", "provider": "airtel"},
            content_type="application/json",
        ).json()["data"]
        assert sim["is_expired"] is False

        client.force_login(self.therapist)
        today = datetime.date.today()
        response = client.post(
            reverse("web_api:sim_recharge", args=[sim["id"]]),
            {"recharge_date": today.isoformat(), "duration_days": 30},
            content_type="application/json",
        )
        assert response.status_code == 200
        payload = response.json()
        assert payload["data"]["expiry_date"] == (today + datetime.timedelta(days=30)).isoformat()
        assert payload["reminder_created"] is True

        bad = client.post(
            reverse("web_api:sim_recharge", args=[sim["id"]]),
            {"recharge_date": today.isoformat(), "duration_days": 0},
            content_type="application/json",
        )
        assert bad.status_code == 400
        assert "duration_days" in bad.json()["errors"]

        detail = client.get(reverse("web_api:sim_detail", args=[sim["id"]])).json()["data"]
        assert len(detail["recharge_history"]) == 1

    def test_therapist_cannot_delete_sim(self, client):
        client.force_login(self.admin)
        sim_id = client.post(
            reverse("web_api:sims"), {"sim_number": "1", "provider": "jio"}, content_type="application/json"
        ).json()["data"]["id"]

        client.force_login(self.therapist)
        assert client.delete(reverse("web_api:sim_detail", args=[sim_id])).status_code == 403
        client.force_login(self.admin)
        assert client.delete(reverse("web_api:sim_detail", args=[sim_id])).status_code == 200
        assert client.get(reverse("web_api:sims")).json()["data"] == []
