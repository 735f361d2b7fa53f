"""
User manager for email-based accounts.

Chat members are identified by email; there is no username. Display
names belong to the Profile created by authentication.signals.
"""

from django.contrib.auth.models import BaseUserManager

# Accepted by older callers but stored on Profile, never on User
PROFILE_ONLY_FIELDS = ("first_name", "last_name", "about")


class UserManager(BaseUserManager):
    """Creates users and superusers keyed by email."""

    def _build_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("The Email field must be set")

        for field_name in PROFILE_ONLY_FIELDS:
            extra_fields.pop(field_name, None)

        user = self.model(email=self.normalize_email(email), **extra_fields)
        if password:
            user.set_password(password)
        else:
            # Token-only accounts (service users, imported members)
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        """
        Create a regular user.

        Raises:
            ValueError: If email is empty
        """
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._build_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create a user with admin site access and all permissions.

        Raises:
            ValueError: If is_staff or is_superuser is explicitly not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        for flag in ("is_staff", "is_superuser"):
            if extra_fields.get(flag) is not True:
                raise ValueError(f"Superuser must have {flag}=True.")

        return self._build_user(email, password, **extra_fields)
