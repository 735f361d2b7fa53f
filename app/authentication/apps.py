"""
Django app configuration for authentication.
"""

from django.apps import AppConfig


class AuthenticationConfig(AppConfig):
    """Identity and profile data for chat viewers."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"
    verbose_name = "Authentication"

    def ready(self):
        """Connect signal handlers (profile auto-creation)."""
        from authentication import signals  # noqa: F401
