"""
Django signals for chat.

Signal handlers:
- Bumping the chat's last_message_at/updated_at when a message is stored

Usage:
    Signals are automatically connected when the app is ready.
    See apps.py for the import that triggers connection.
"""

import logging

from django.db.models import F, Q, Value
from django.db.models.functions import Greatest
from django.db.models.signals import post_save
from django.dispatch import receiver

from chat.models import Chat, Message

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Message)
def touch_chat_on_message(sender, instance, created, **kwargs):
    """
    Record message activity on the chat.

    Only moves last_message_at forward, so importing older messages does
    not reorder the chat list. updated_at never moves backward either: a
    rename or membership change after the message keeps its own time.
    """
    if not created:
        return

    updated = (
        Chat.objects.filter(pk=instance.chat_id)
        .filter(Q(last_message_at__isnull=True) | Q(last_message_at__lt=instance.created_at))
        .update(
            last_message_at=instance.created_at,
            updated_at=Greatest(F("updated_at"), Value(instance.created_at)),
        )
    )
    if updated:
        logger.debug(f"Chat {instance.chat_id} activity at {instance.created_at}")
