"""
Chat system models.

This module defines the data models for the chat system supporting:
- Direct chats between exactly two users
- Group chats owned by a single admin

Models:
    Chat: Conversation record (direct or group variant)
    ChatMember: Membership row carrying the member's deletion marker
    DirectChatPair: Helper for enforcing uniqueness of direct chats
    Message: Minimal message record queried for visibility decisions

Design Decisions:
    - Membership and deletion markers live in one row (ChatMember), so a
      member can never exist without a marker or the other way round
    - Group/direct fields are enforced by database check constraints
    - Direct chats are unique per unordered user pair (DirectChatPair)
    - Deleting a chat removes it for every member (hard delete)
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from chat.managers import ChatQuerySet, MessageQuerySet
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class ChatType(models.TextChoices):
    """
    Type of chat.

    DIRECT: Exactly two members, no name, no admin
    GROUP: Named, admin-owned, membership managed by the admin
    """

    DIRECT = "direct", "Direct Message"
    GROUP = "group", "Group"


class Chat(UUIDPrimaryKeyMixin, BaseModel):
    """
    A chat between two or more users.

    Chat Types:
        DIRECT: Two members. Unique per user pair (enforced via DirectChatPair).
                Either member may delete it.

        GROUP: Named chat administered by its creator (group_admin).
               Only the admin can change members, name and picture, or
               delete it. The admin cannot leave.

    Fields:
        chat_type: Variant tag (direct or group)
        name: Group name (empty string for direct chats)
        group_admin: Group administrator (null for direct chats)
        group_picture: Optional picture reference for groups
        last_message_at: Timestamp of most recent message (null until the first)

    Relationships:
        memberships: ChatMember rows (member + deletion marker)
        members: Users in the chat (through ChatMember)
        messages: Message records
        direct_pair: DirectChatPair if type is DIRECT
    """

    chat_type = models.CharField(
        max_length=10,
        choices=ChatType.choices,
        default=ChatType.DIRECT,
        db_index=True,
        help_text="Type of chat (direct or group)",
    )

    name = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Name for group chats (empty for direct)",
    )

    group_admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="administered_chats",
        help_text="Administrator of a group chat (null for direct)",
    )

    group_picture = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Picture reference for group chats (URL or storage key)",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of most recent message (null until the first message)",
    )

    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="ChatMember",
        related_name="chats",
        help_text="Users taking part in this chat",
    )

    objects = ChatQuerySet.as_manager()

    class Meta:
        db_table = "chat_chat"
        ordering = ["-updated_at"]
        indexes = [
            models.Index(fields=["-updated_at"], name="chat_chat_updated_idx"),
        ]
        constraints = [
            # Group: named and administered. Direct: none of the group fields.
            models.CheckConstraint(
                condition=(
                    (
                        Q(chat_type=ChatType.GROUP, group_admin__isnull=False)
                        & ~Q(name="")
                    )
                    | Q(
                        chat_type=ChatType.DIRECT,
                        group_admin__isnull=True,
                        name="",
                        group_picture="",
                    )
                ),
                name="chat_variant_fields",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.is_direct:
            return f"Direct({self.pk})"
        return f"Group: {self.name}"

    @property
    def is_direct(self) -> bool:
        """Check if this is a direct (1:1) chat."""
        return self.chat_type == ChatType.DIRECT

    @property
    def is_group(self) -> bool:
        """Check if this is a group chat."""
        return self.chat_type == ChatType.GROUP

    @property
    def has_messages(self) -> bool:
        """
        Check if the chat has seen a message since it was created.

        A last_message_at older than created_at (imported history) does not
        count as activity in this chat.
        """
        return (
            self.last_message_at is not None
            and self.last_message_at >= self.created_at
        )


class ChatMember(BaseModel):
    """
    A user's membership in a chat together with their deletion marker.

    messages_deleted_at marks "cleared up to" for this member's view of the
    chat. On insert it equals joined_at, the sentinel meaning nothing has
    been cleared yet. Clearing moves it to the current time and stamps
    cleared_at, so a clear is recorded even when it lands on the same
    instant as the join.

    Membership Lifecycle:
        1. Chat created / member added: row inserted with sentinel marker
        2. Member clears chat: messages_deleted_at and cleared_at set to now
        3. Member leaves or is removed: row deleted (marker goes with it)

    Fields:
        chat: Chat this membership belongs to
        user: Member
        joined_at: When the user entered the chat
        messages_deleted_at: The member's deletion marker
        cleared_at: When the member last cleared the chat (null if never)

    Constraints:
        - UniqueConstraint(chat, user): one membership per user per chat
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Chat this membership belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_memberships",
        help_text="Member of the chat",
    )

    joined_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the user joined this chat",
    )

    messages_deleted_at = models.DateTimeField(
        help_text="Messages up to this time are cleared for this member",
    )

    cleared_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the member last cleared the chat (null if never)",
    )

    class Meta:
        db_table = "chat_member"
        ordering = ["joined_at", "id"]
        indexes = [
            models.Index(fields=["user", "chat"], name="chat_member_user_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_member",
            ),
            models.CheckConstraint(
                condition=Q(messages_deleted_at__gte=F("joined_at")),
                name="chat_member_marker_after_join",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"ChatMember: {self.user_id} in {self.chat_id}"

    def save(self, *args, **kwargs):
        """Default the deletion marker to the join time (the sentinel)."""
        if self.messages_deleted_at is None:
            self.messages_deleted_at = self.joined_at
        super().save(*args, **kwargs)

    @property
    def has_cleared(self) -> bool:
        """Check if this member has ever cleared the chat."""
        return self.cleared_at is not None


class DirectChatPair(models.Model):
    """
    Enforces uniqueness of direct chats between two users.

    Stores the pair in canonical order (lower user id first) so that the
    unique constraint catches duplicates regardless of who initiated the
    chat, including two concurrent create requests.

    Fields:
        chat: The direct chat (OneToOne, serves as PK)
        user_lower: User with lower ID
        user_higher: User with higher ID

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One chat per pair
        - CheckConstraint(user_lower_id < user_higher_id): Canonical order
    """

    chat = models.OneToOneField(
        Chat,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The direct chat this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower ID in this chat pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher ID in this chat pair",
    )

    class Meta:
        db_table = "chat_direct_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_chat_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="direct_pair_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def canonical(user_a_id: int, user_b_id: int) -> tuple[int, int]:
        """Return the two user ids in canonical (ascending) order."""
        return (user_a_id, user_b_id) if user_a_id < user_b_id else (user_b_id, user_a_id)


class Message(BaseModel):
    """
    A message within a chat.

    Only what the visibility rules need is stored here: which chat, who
    sent it and when. Delivery and rendering belong to the messaging
    subsystem.

    created_at accepts explicit values so that imported history keeps its
    original timestamps.

    Fields:
        chat: Chat this message belongs to
        sender: User who sent the message (null if the account is gone)
        content: Message text
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Chat this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_chat_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        blank=True,
        default="",
        help_text="Message text",
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the message was sent",
    )

    objects = MessageQuerySet.as_manager()

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["chat", "created_at"],
                name="chat_msg_chat_created_idx",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        sender_str = f"User {self.sender_id}" if self.sender_id else "Unknown"
        preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"{sender_str}: {preview}"

