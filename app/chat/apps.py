"""
Chat application configuration.

This app provides the chat system with:
- Direct (1:1) and group chats
- Group administration (members, name, picture)
- Per-member clearing of chat history
- Per-viewer chat list visibility
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

    def ready(self):
        """Connect chat signal handlers."""
        import chat.signals  # noqa: F401
