"""
Member set validation for chat creation and group updates.

normalize_members() turns a requested member list into the final member
id set: the requesting user is always added, duplicates collapse, and
the size rule for the chat variant is enforced. Every member must be an
existing, active user.

Failures raise django.core.exceptions.ValidationError whose ``code`` is
one of the ChatErrorCode values, so services can turn them straight into
a ServiceResult failure.
"""

from __future__ import annotations

from collections.abc import Iterable

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from chat.constants import CHAT_CONFIG, ChatErrorCode


def _coerce_ids(member_ids: Iterable | None) -> set[int]:
    ids = set()
    for raw in member_ids or []:
        if isinstance(raw, bool):
            raise ValidationError(
                "Member ids must be integers", code=ChatErrorCode.VALIDATION_ERROR
            )
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValidationError(
                "Member ids must be integers", code=ChatErrorCode.VALIDATION_ERROR
            )
        if value < 1:
            raise ValidationError(
                "Member ids must be positive", code=ChatErrorCode.VALIDATION_ERROR
            )
        ids.add(value)
    return ids


def normalize_members(viewer, member_ids: Iterable | None, *, is_group: bool) -> set[int]:
    """
    Build the final member id set for a chat.

    Args:
        viewer: The requesting user (always included)
        member_ids: Requested member ids (may include the viewer or duplicates)
        is_group: Whether the set is for a group chat

    Returns:
        Set of user ids including the viewer

    Raises:
        ValidationError: code NOT_ENOUGH_MEMBERS, TOO_MANY_MEMBERS,
            INVALID_DIRECT_MEMBERS, UNKNOWN_MEMBERS or VALIDATION_ERROR
    """
    members = _coerce_ids(member_ids)
    members.add(viewer.pk)

    if is_group:
        if len(members) < CHAT_CONFIG.MIN_GROUP_MEMBERS:
            raise ValidationError(
                "More than 2 users are required to form a group chat",
                code=ChatErrorCode.NOT_ENOUGH_MEMBERS,
            )
        if len(members) > CHAT_CONFIG.MAX_GROUP_MEMBERS:
            raise ValidationError(
                f"A group chat can have at most {CHAT_CONFIG.MAX_GROUP_MEMBERS} members",
                code=ChatErrorCode.TOO_MANY_MEMBERS,
            )
    elif len(members) != CHAT_CONFIG.DIRECT_MEMBER_COUNT:
        raise ValidationError(
            "A direct chat needs exactly one other user",
            code=ChatErrorCode.INVALID_DIRECT_MEMBERS,
        )

    User = get_user_model()
    known = set(
        User.objects.filter(pk__in=members, is_active=True).values_list("pk", flat=True)
    )
    unknown = sorted(members - known)
    if unknown:
        raise ValidationError(
            f"Unknown users: {', '.join(str(pk) for pk in unknown)}",
            code=ChatErrorCode.UNKNOWN_MEMBERS,
        )

    return members
