"""
Serializers for chat API.

This module provides serializers for the chat system:
- Chat serializers (read, create, group update)
- Member profile summaries embedded in chats
- The viewer's chat listing

Serializer Hierarchy:
    ChatMemberProfileSerializer: Display data for one member
    MessagesDeletedAtSerializer: One member's deletion marker
    ChatSerializer: Full chat with members (viewer excluded) and markers
    ChatCreateSerializer: Direct/group chat creation input
    GroupUpdateSerializer: Group members/name/picture replacement input
    ChatListingSerializer: updated_chats + cleared_chats

Design Decisions:
    - Read and write serializers are separate for clarity
    - Business rules (member counts, names, admin rights) live in the
      services so that they are enforced the same way for every caller;
      write serializers only check shapes
    - The viewer is taken from the request in serializer context
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from chat.constants import CHAT_CONFIG
from chat.models import Chat, ChatMember

User = get_user_model()


# =============================================================================
# Member Summaries
# =============================================================================


class ChatMemberProfileSerializer(serializers.ModelSerializer):
    """
    Public display data for a chat member.

    Name, picture and about text come from the member's Profile.
    """

    first_name = serializers.CharField(source="profile.first_name", read_only=True)
    last_name = serializers.CharField(source="profile.last_name", read_only=True)
    about = serializers.CharField(source="profile.about", read_only=True)
    profile_picture = serializers.SerializerMethodField(
        help_text="URL of the member's profile picture"
    )

    class Meta:
        model = User
        fields = ["id", "first_name", "last_name", "profile_picture", "about", "email"]
        read_only_fields = fields

    def get_profile_picture(self, obj: User) -> str | None:
        picture = obj.profile.profile_picture
        if not picture:
            return None
        request = self.context.get("request")
        if request is not None:
            return request.build_absolute_uri(picture.url)
        return picture.url


class MessagesDeletedAtSerializer(serializers.ModelSerializer):
    """A member's deletion marker."""

    user_id = serializers.IntegerField(read_only=True)
    date = serializers.DateTimeField(source="messages_deleted_at", read_only=True)

    class Meta:
        model = ChatMember
        fields = ["user_id", "date"]
        read_only_fields = fields


# =============================================================================
# Chat
# =============================================================================


class ChatSerializer(serializers.ModelSerializer):
    """
    Full chat representation.

    members lists everyone except the requesting user. messages_deleted_at
    has one entry per member, the requesting user included.
    """

    is_group = serializers.BooleanField(read_only=True)
    group_admin = serializers.PrimaryKeyRelatedField(read_only=True)
    members = serializers.SerializerMethodField(
        help_text="Other members of the chat"
    )
    messages_deleted_at = MessagesDeletedAtSerializer(
        source="memberships",
        many=True,
        read_only=True,
    )

    class Meta:
        model = Chat
        fields = [
            "id",
            "chat_type",
            "is_group",
            "name",
            "group_admin",
            "group_picture",
            "members",
            "messages_deleted_at",
            "last_message_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_members(self, obj: Chat) -> list[dict]:
        request = self.context.get("request")
        viewer_id = request.user.pk if request is not None else None
        others = [m.user for m in obj.memberships.all() if m.user_id != viewer_id]
        return ChatMemberProfileSerializer(others, many=True, context=self.context).data


class ChatCreateSerializer(serializers.Serializer):
    """
    Input for creating a chat.

    - Direct: members holds the one other user
    - Group: members holds at least two other users, name is required
    """

    members = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=True,
        help_text="IDs of the other users (the requesting user is added automatically)",
    )
    name = serializers.CharField(
        max_length=CHAT_CONFIG.MAX_NAME_LENGTH,
        required=False,
        allow_blank=True,
        default="",
        help_text="Group name (required for groups, ignored for direct chats)",
    )
    is_group = serializers.BooleanField(
        required=False,
        default=False,
        help_text="Create a group chat instead of a direct chat",
    )


class GroupUpdateSerializer(serializers.Serializer):
    """Input for replacing a group's members, name and picture."""

    members = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=True,
        help_text="Full list of member IDs after the update",
    )
    name = serializers.CharField(
        max_length=CHAT_CONFIG.MAX_NAME_LENGTH,
        required=False,
        allow_blank=True,
        default="",
        help_text="New group name",
    )
    group_picture = serializers.CharField(
        max_length=CHAT_CONFIG.MAX_PICTURE_URL_LENGTH,
        required=False,
        allow_blank=True,
        help_text="New group picture reference (omit to keep the current one)",
    )


class ChatListingSerializer(serializers.Serializer):
    """The viewer's chat list."""

    updated_chats = ChatSerializer(many=True, read_only=True)
    cleared_chats = serializers.ListField(
        child=serializers.UUIDField(),
        read_only=True,
        help_text="IDs of chats cleared by the viewer with no newer messages",
    )


class ErrorResponseSerializer(serializers.Serializer):
    """Error envelope returned by every chat endpoint."""

    success = serializers.BooleanField(default=False)
    error = serializers.CharField()
    error_code = serializers.CharField()
    kind = serializers.ChoiceField(
        choices=["validation", "authorization", "not_found", "conflict", "internal"]
    )
