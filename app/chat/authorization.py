"""
Service-level authorization for chat operations.

This module provides the two predicates every chat operation is gated on:
group administration and membership. Both are pure reads of the chat's
own state and never raise.

Key Components:
    ChatAuthorizationService: Stateless service class with authorization methods

Usage:
    if not ChatAuthorizationService.is_group_admin(chat, user.pk):
        return ServiceResult.failure("Only admins can edit", error_code=...)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from chat.models import Chat, ChatMember


class ChatAuthorizationService:
    """
    Stateless service providing authorization checks for chat operations.

    All methods are classmethods and can be called directly without instantiation.

    Performance Notes:
        - Membership lookups reuse memberships preloaded by
          Chat.objects.with_members(); otherwise a single query is issued
    """

    @classmethod
    def is_group_admin(cls, chat: "Chat", user_id: int) -> bool:
        """
        Check if the user administers the chat.

        Always False for direct chats, which have no admin.
        """
        return chat.is_group and chat.group_admin_id == user_id

    @classmethod
    def is_member(cls, chat: "Chat", user_id: int) -> bool:
        """Check if the user is currently a member of the chat."""
        return cls.get_membership(chat, user_id) is not None

    @classmethod
    def get_membership(cls, chat: "Chat", user_id: int) -> Optional["ChatMember"]:
        """
        Return the user's membership row (with deletion marker), or None.

        Args:
            chat: Chat to inspect
            user_id: ID of the user

        Returns:
            ChatMember if the user is a member, None otherwise
        """
        for membership in chat.memberships.all():
            if membership.user_id == user_id:
                return membership
        return None
