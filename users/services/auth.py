"""
Auth-related service utilities.
"""

from typing import Optional, Tuple

from django.contrib.auth import authenticate, login, logout

from users.models import CustomUser


class AuthService:
    """Session login/logout for staff accounts (e-mail + password)."""

    def login(self, request, email: str, password: str) -> Tuple[bool, Optional[CustomUser] | str]:
        if not email or not password:
            return False, "Email and password are required"

        user = authenticate(request, username=email.strip().lower(), password=password)
        if user is None:
            return False, "Invalid credentials"
        if not user.is_active:
            return False, "Account is disabled"

        login(request, user)
        return True, user

    def logout(self, request) -> None:
        logout(request)
