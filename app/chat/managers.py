"""
QuerySets for chat models.

These are the chat store's query operations: member-set lookup of direct
chats, listing a member's chats with their memberships preloaded, and the
"any message after a marker" existence check used by visibility.
"""

from __future__ import annotations

from django.db import models
from django.db.models import Prefetch


class ChatQuerySet(models.QuerySet):
    """QuerySet for Chat with member-aware filters."""

    def with_members(self):
        """Preload admin, memberships and member profiles in join order."""
        # Import here to avoid circular imports
        from chat.models import ChatMember

        return self.select_related("group_admin").prefetch_related(
            Prefetch(
                "memberships",
                queryset=ChatMember.objects.select_related("user__profile").order_by(
                    "joined_at", "id"
                ),
            )
        )

    def for_member(self, user):
        """Chats the user is currently a member of."""
        return self.filter(memberships__user=user)

    def direct_between(self, user_a_id: int, user_b_id: int):
        """The direct chat between two users, regardless of argument order."""
        from chat.models import ChatType, DirectChatPair

        lower, higher = DirectChatPair.canonical(user_a_id, user_b_id)
        return self.filter(
            chat_type=ChatType.DIRECT,
            direct_pair__user_lower_id=lower,
            direct_pair__user_higher_id=higher,
        )


class MessageQuerySet(models.QuerySet):
    """QuerySet for Message."""

    def in_chat_after(self, chat, since):
        """Messages in the chat created strictly after ``since``."""
        return self.filter(chat=chat, created_at__gt=since)
