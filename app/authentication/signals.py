"""
Django signals for authentication.

Signal handlers:
- Auto-creating Profile when User is created

Usage:
    Signals are automatically connected when the app is ready.
    See apps.py for the import that triggers connection.
"""

import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_profile(sender, instance, created, **kwargs):
    """
    Create a Profile for newly created users.

    Chat member summaries read names from the profile, so every user
    needs one. Profile starts with empty fields.
    """
    if created:
        from authentication.models import Profile

        Profile.objects.get_or_create(user=instance)
        logger.debug(f"Profile created for user: {instance.pk}")
