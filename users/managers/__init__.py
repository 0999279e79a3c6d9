from .custom_user import CustomUserManager

__all__ = ["CustomUserManager"]
