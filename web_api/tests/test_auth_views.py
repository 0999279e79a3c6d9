import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse

from users import choices
from users.models import AuditLog


@pytest.mark.django_db
class TestAuthViews:
    def setup_method(self):
        self.user = get_user_model().objects.create_user(
            email="admin@homer.org",
            password="password1",
            first_name="Ada",
            role=choices.UserRole.ADMIN,
        )

    def test_login_and_me(self, client):
        response = client.post(
            reverse("web_api:auth_login"),
            {"email": "ADMIN@homer.org", "password": "password1"},
            content_type="application/json",
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"

        me = client.get(reverse("web_api:auth_me"))
        assert me.json()["data"]["email"] == "admin@homer.org"
        assert not AuditLog.objects.exists()

    def test_wrong_password(self, client):
        response = client.post(
            reverse("web_api:auth_login"),
            {"email": "admin@homer.org", "password": "wrong-password"},
            content_type="application/json",
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_logout(self, client):
        client.force_login(self.user)
        client.post(reverse("web_api:auth_logout"))
        assert client.get(reverse("web_api:auth_me")).status_code == 401

    def test_health_is_public(self, client):
        response = client.get(reverse("web_api:health"))
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "ok"

    def test_method_not_allowed(self, client):
        client.force_login(self.user)
        assert client.delete(reverse("web_api:auth_me")).status_code == 405
