"""
Chat system service layer.

This module provides the business logic for the chat system: the chat
lifecycle (create, read, update, leave, clear, delete) and the per-viewer
visibility decision behind the chat list.

Services:
    ChatService: Chat lifecycle operations
    ChatVisibilityService: Splits a viewer's chats into visible and cleared

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure() with a ChatErrorCode
    - Unexpected failures raise exceptions
    - Read-modify-write operations lock the chat row inside a transaction

Usage:
    from chat.services import ChatService, ChatVisibilityService

    result = ChatService.create_chat(viewer, member_ids=[other.id])
    if result.success:
        chat = result.data

    listing = ChatVisibilityService.get_chats(viewer).data
    listing.updated_chats  # chats to show
    listing.cleared_chats  # ids of chats the viewer cleared with nothing new
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.utils import timezone

from core.helpers import parse_uuid
from core.services import BaseService, ServiceResult

from chat.authorization import ChatAuthorizationService
from chat.constants import ChatErrorCode
from chat.models import Chat, ChatMember, ChatType, DirectChatPair, Message
from chat.validators import normalize_members

if TYPE_CHECKING:
    from datetime import datetime

    from authentication.models import User


@dataclass
class ChatListing:
    """
    A viewer's chat list.

    Attributes:
        updated_chats: Chats to display, most recently updated first
        cleared_chats: IDs of chats the viewer cleared that have had no
            message since
    """

    updated_chats: list[Chat] = field(default_factory=list)
    cleared_chats: list[uuid.UUID] = field(default_factory=list)


class ChatService(BaseService):
    """
    Service for chat lifecycle operations.

    Methods:
        create_chat: Create a direct or group chat
        get_chat: Fetch a chat the viewer belongs to
        delete_chat: Hard delete a chat for every member
        update_group: Replace a group's members, name and picture
        leave_group: Remove the viewer from a group
        clear_chat: Advance the viewer's deletion marker to now
    """

    # =========================================================================
    # Helpers
    # =========================================================================

    @classmethod
    def _invalid_id(cls) -> ServiceResult:
        return ServiceResult.failure("Invalid chat id", error_code=ChatErrorCode.INVALID_ID)

    @classmethod
    def _not_found(cls) -> ServiceResult:
        return ServiceResult.failure(
            "Chat not found", error_code=ChatErrorCode.CHAT_NOT_FOUND
        )

    @classmethod
    def _member_error(cls, exc: ValidationError) -> ServiceResult:
        return ServiceResult.failure(
            exc.messages[0],
            error_code=exc.code or ChatErrorCode.VALIDATION_ERROR,
        )

    @classmethod
    def _locked(cls, chat_id: uuid.UUID) -> Chat | None:
        """Fetch and row-lock a chat. Must be called inside a transaction."""
        return Chat.objects.select_for_update().filter(pk=chat_id).first()

    @classmethod
    def _reload(cls, chat_id: uuid.UUID) -> Chat:
        return Chat.objects.with_members().get(pk=chat_id)

    @classmethod
    def _add_members(cls, chat: Chat, user_ids, since: datetime) -> None:
        """Insert membership rows with the sentinel marker (marker == joined_at)."""
        ChatMember.objects.bulk_create(
            [
                ChatMember(
                    chat=chat,
                    user_id=user_id,
                    joined_at=since,
                    messages_deleted_at=since,
                )
                for user_id in sorted(user_ids)
            ]
        )

    # =========================================================================
    # Create
    # =========================================================================

    @classmethod
    def create_chat(
        cls,
        viewer: User,
        member_ids,
        name: str | None = None,
        is_group: bool = False,
    ) -> ServiceResult[Chat]:
        """
        Create a direct or group chat.

        The viewer is always a member. A group is administered by the
        viewer and needs a name. A direct chat is unique per user pair.

        Args:
            viewer: Requesting user
            member_ids: IDs of the other members (viewer may be included)
            name: Group name (required for groups, ignored for direct chats)
            is_group: Create a group rather than a direct chat

        Returns:
            ServiceResult with the new Chat, members preloaded

        Error codes:
            NOT_ENOUGH_MEMBERS, TOO_MANY_MEMBERS, INVALID_DIRECT_MEMBERS,
            UNKNOWN_MEMBERS, VALIDATION_ERROR: Member set rejected
            NAME_REQUIRED: Group without a name
            CHAT_EXISTS: Direct chat with this user already exists
        """
        try:
            members = normalize_members(viewer, member_ids, is_group=is_group)
        except ValidationError as exc:
            return cls._member_error(exc)

        if is_group:
            name = (name or "").strip()
            if not name:
                return ServiceResult.failure(
                    "You must add a group name",
                    error_code=ChatErrorCode.NAME_REQUIRED,
                )
            return cls._create_group(viewer, members, name)

        return cls._create_direct(viewer, members)

    @classmethod
    def _create_group(cls, viewer: User, members: set[int], name: str) -> ServiceResult[Chat]:
        with cls.atomic():
            chat = Chat.objects.create(
                chat_type=ChatType.GROUP,
                name=name,
                group_admin=viewer,
            )
            cls._add_members(chat, members, since=chat.created_at)

        cls.get_logger().info(
            f"Created group chat {chat.id} by user {viewer.id} "
            f"with {len(members)} members"
        )
        return ServiceResult.success(cls._reload(chat.pk))

    @classmethod
    def _create_direct(cls, viewer: User, members: set[int]) -> ServiceResult[Chat]:
        lower, higher = sorted(members)

        if Chat.objects.direct_between(lower, higher).exists():
            return ServiceResult.failure(
                "Chat already exists", error_code=ChatErrorCode.CHAT_EXISTS
            )

        try:
            with cls.atomic():
                chat = Chat.objects.create(chat_type=ChatType.DIRECT)
                DirectChatPair.objects.create(
                    chat=chat,
                    user_lower_id=lower,
                    user_higher_id=higher,
                )
                cls._add_members(chat, members, since=chat.created_at)
        except IntegrityError:
            # Concurrent create for the same pair won the unique constraint
            if not Chat.objects.direct_between(lower, higher).exists():
                raise
            cls.get_logger().info(
                f"Direct chat between users {lower} and {higher} created concurrently"
            )
            return ServiceResult.failure(
                "Chat already exists", error_code=ChatErrorCode.CHAT_EXISTS
            )

        cls.get_logger().info(
            f"Created direct chat {chat.id} between users {lower} and {higher}"
        )
        return ServiceResult.success(cls._reload(chat.pk))

    # =========================================================================
    # Read
    # =========================================================================

    @classmethod
    def get_chat(cls, viewer: User, chat_id) -> ServiceResult[Chat]:
        """
        Fetch a chat with its members.

        Chats the viewer does not belong to are reported as not found.

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No such chat, or viewer is not a member
        """
        pk = parse_uuid(chat_id)
        if pk is None:
            return cls._invalid_id()

        chat = Chat.objects.with_members().filter(pk=pk).first()
        if chat is None or not ChatAuthorizationService.is_member(chat, viewer.pk):
            return cls._not_found()

        return ServiceResult.success(chat)

    # =========================================================================
    # Delete
    # =========================================================================

    @classmethod
    def delete_chat(cls, viewer: User, chat_id) -> ServiceResult[Chat]:
        """
        Permanently delete a chat for every member.

        Group chats can only be deleted by their admin. Either member of a
        direct chat may delete it.

        Returns:
            ServiceResult with the chat as it was just before deletion

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No such chat (or it was deleted concurrently)
            NOT_GROUP_ADMIN: Viewer does not administer the group
            NOT_CHAT_MEMBER: Viewer is not a member of the direct chat
        """
        pk = parse_uuid(chat_id)
        if pk is None:
            return cls._invalid_id()

        with cls.atomic():
            chat = cls._locked(pk)
            if chat is None:
                return cls._not_found()

            if chat.is_group:
                if not ChatAuthorizationService.is_group_admin(chat, viewer.pk):
                    return ServiceResult.failure(
                        "Only admins can delete this chat",
                        error_code=ChatErrorCode.NOT_GROUP_ADMIN,
                    )
            elif not ChatAuthorizationService.is_member(chat, viewer.pk):
                return ServiceResult.failure(
                    "You are not a member of this chat",
                    error_code=ChatErrorCode.NOT_CHAT_MEMBER,
                )

            snapshot = cls._reload(pk)
            deleted, _ = Chat.objects.filter(pk=pk).delete()
            if not deleted:
                return cls._not_found()

        cls.get_logger().info(f"Chat {pk} deleted by user {viewer.id}")
        return ServiceResult.success(snapshot)

    # =========================================================================
    # Group management
    # =========================================================================

    @classmethod
    def update_group(
        cls,
        viewer: User,
        chat_id,
        member_ids,
        name: str | None,
        group_picture: str | None = None,
    ) -> ServiceResult[Chat]:
        """
        Replace a group's members, name and (optionally) picture.

        Retained members keep their deletion markers. Removed members lose
        theirs. New members start with a fresh sentinel marker.

        Args:
            viewer: Requesting user (must be the group admin)
            chat_id: ID of the group
            member_ids: New member ids (viewer is always kept)
            name: New group name (required)
            group_picture: New picture reference, None keeps the current one

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No such chat
            NOT_GROUP_CHAT: Chat is a direct chat
            NAME_REQUIRED: Empty name
            NOT_GROUP_ADMIN: Viewer does not administer the group
            NOT_ENOUGH_MEMBERS, TOO_MANY_MEMBERS, UNKNOWN_MEMBERS,
            VALIDATION_ERROR: Member set rejected
        """
        pk = parse_uuid(chat_id)
        if pk is None:
            return cls._invalid_id()

        with cls.atomic():
            chat = cls._locked(pk)
            if chat is None:
                return cls._not_found()

            if not chat.is_group:
                return ServiceResult.failure(
                    "This chat is not a group chat, you can delete the whole chat",
                    error_code=ChatErrorCode.NOT_GROUP_CHAT,
                )

            name = (name or "").strip()
            if not name:
                return ServiceResult.failure(
                    "You must add a group name",
                    error_code=ChatErrorCode.NAME_REQUIRED,
                )

            if not ChatAuthorizationService.is_group_admin(chat, viewer.pk):
                return ServiceResult.failure(
                    "Only admins can edit this chat",
                    error_code=ChatErrorCode.NOT_GROUP_ADMIN,
                )

            try:
                members = normalize_members(viewer, member_ids, is_group=True)
            except ValidationError as exc:
                return cls._member_error(exc)

            chat.name = name
            update_fields = ["name", "updated_at"]
            if group_picture is not None:
                chat.group_picture = group_picture
                update_fields.append("group_picture")
            chat.save(update_fields=update_fields)

            added, removed = cls._sync_members(chat, members)

        cls.get_logger().info(
            f"Group {pk} updated by user {viewer.id}: "
            f"{len(added)} added, {len(removed)} removed"
        )
        return ServiceResult.success(cls._reload(pk))

    @classmethod
    def _sync_members(cls, chat: Chat, members: set[int]) -> tuple[set[int], set[int]]:
        """Reconcile membership rows with the target member set."""
        current = set(chat.memberships.values_list("user_id", flat=True))
        added = members - current
        removed = current - members

        if removed:
            chat.memberships.filter(user_id__in=removed).delete()
        if added:
            cls._add_members(chat, added, since=timezone.now())

        return added, removed

    @classmethod
    def leave_group(cls, viewer: User, chat_id) -> ServiceResult[Chat]:
        """
        Remove the viewer from a group.

        The viewer's membership row (and with it their deletion marker) is
        removed. Other members are untouched. The admin cannot leave.

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No such chat
            NOT_GROUP_CHAT: Chat is a direct chat
            NOT_CHAT_MEMBER: Viewer is not in the group
            ADMIN_CANNOT_LEAVE: Viewer administers the group
        """
        pk = parse_uuid(chat_id)
        if pk is None:
            return cls._invalid_id()

        with cls.atomic():
            chat = cls._locked(pk)
            if chat is None:
                return cls._not_found()

            if not chat.is_group:
                return ServiceResult.failure(
                    "This chat isn't a group chat",
                    error_code=ChatErrorCode.NOT_GROUP_CHAT,
                )

            membership = ChatAuthorizationService.get_membership(chat, viewer.pk)
            if membership is None:
                return ServiceResult.failure(
                    "You are not a member of this chat",
                    error_code=ChatErrorCode.NOT_CHAT_MEMBER,
                )

            if ChatAuthorizationService.is_group_admin(chat, viewer.pk):
                return ServiceResult.failure(
                    "You are the admin! You can delete this chat instead",
                    error_code=ChatErrorCode.ADMIN_CANNOT_LEAVE,
                )

            membership.delete()
            chat.save(update_fields=["updated_at"])

        cls.get_logger().info(f"User {viewer.id} left group {pk}")
        return ServiceResult.success(cls._reload(pk))

    # =========================================================================
    # Clear
    # =========================================================================

    @classmethod
    def clear_chat(cls, viewer: User, chat_id) -> ServiceResult[Chat]:
        """
        Clear the chat for the viewer only.

        Sets the viewer's deletion marker to now and records the clear.
        Other members and the chat itself are untouched. Chats the viewer
        does not belong to are reported as not found, as in get_chat.

        Error codes:
            INVALID_ID: Malformed chat id
            CHAT_NOT_FOUND: No such chat, or viewer is not a member
        """
        pk = parse_uuid(chat_id)
        if pk is None:
            return cls._invalid_id()

        with cls.atomic():
            chat = cls._locked(pk)
            if chat is None:
                return cls._not_found()

            membership = (
                ChatMember.objects.select_for_update()
                .filter(chat=chat, user=viewer)
                .first()
            )
            if membership is None:
                cls.get_logger().debug(
                    f"User {viewer.id} tried to clear chat {pk} without being a member"
                )
                return cls._not_found()

            now = timezone.now()
            membership.messages_deleted_at = now
            membership.cleared_at = now
            membership.save(
                update_fields=["messages_deleted_at", "cleared_at", "updated_at"]
            )

        cls.get_logger().info(f"User {viewer.id} cleared chat {pk}")
        return ServiceResult.success(cls._reload(pk))


class ChatVisibilityService(BaseService):
    """
    Decides which of a viewer's chats are shown and which stay cleared.

    A chat is shown when any of these holds, checked in order:
        - it is a group (groups are never auto-cleared)
        - it is fresh: no message yet and the viewer never cleared it
        - a message arrived after the viewer's deletion marker

    Every other chat the viewer belongs to is reported by id as cleared.
    """

    @classmethod
    def is_fresh(cls, chat: Chat, membership: ChatMember) -> bool:
        """Check if the chat has had no messages and the viewer never cleared it."""
        return not chat.has_messages and not membership.has_cleared

    @classmethod
    def has_new_messages(cls, chat: Chat, membership: ChatMember) -> bool:
        """Check if any message arrived after the viewer's deletion marker."""
        return Message.objects.in_chat_after(chat, membership.messages_deleted_at).exists()

    @classmethod
    def is_visible(cls, chat: Chat, membership: ChatMember) -> bool:
        if chat.is_group:
            return True
        return cls.is_fresh(chat, membership) or cls.has_new_messages(chat, membership)

    @classmethod
    def get_chats(cls, viewer: User) -> ServiceResult[ChatListing]:
        """
        Build the viewer's chat list.

        Returns:
            ServiceResult with a ChatListing; updated_chats keep the
            most-recently-updated-first order
        """
        listing = ChatListing()
        chats = Chat.objects.for_member(viewer).with_members().order_by("-updated_at", "-id")

        for chat in chats:
            membership = ChatAuthorizationService.get_membership(chat, viewer.pk)
            if membership is None:
                # Removed between the filter and the prefetch
                continue
            if cls.is_visible(chat, membership):
                listing.updated_chats.append(chat)
            else:
                listing.cleared_chats.append(chat.id)

        cls.get_logger().debug(
            f"User {viewer.id} chat list: {len(listing.updated_chats)} shown, "
            f"{len(listing.cleared_chats)} cleared"
        )
        return ServiceResult.success(listing)
