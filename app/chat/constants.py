"""
Chat system constants and configuration.

Centralizes limits and the error taxonomy used by the chat services
and views.

Usage:
    from chat.constants import CHAT_CONFIG, ChatErrorCode, status_for_error_code

    if len(name) > CHAT_CONFIG.MAX_NAME_LENGTH:
        ...
"""

from __future__ import annotations

from typing import Final

from rest_framework import status


# =============================================================================
# Chat Configuration
# =============================================================================


class CHAT_CONFIG:
    """
    Chat limits.

    Attributes:
        MAX_NAME_LENGTH: Longest allowed group name
        MAX_PICTURE_URL_LENGTH: Longest allowed group picture reference
        DIRECT_MEMBER_COUNT: Members in a direct chat (viewer included)
        MIN_GROUP_MEMBERS: Fewest members in a new group (viewer included)
        MAX_GROUP_MEMBERS: Most members a group may hold
    """

    MAX_NAME_LENGTH: Final[int] = 100
    MAX_PICTURE_URL_LENGTH: Final[int] = 500
    DIRECT_MEMBER_COUNT: Final[int] = 2
    MIN_GROUP_MEMBERS: Final[int] = 3
    MAX_GROUP_MEMBERS: Final[int] = 256


# =============================================================================
# Error Taxonomy
# =============================================================================


class ChatErrorKind:
    """
    Error kinds exposed to API clients.

    VALIDATION: Malformed or insufficient input, caller's fault, no retry
    AUTHORIZATION: Caller lacks permission for the operation
    NOT_FOUND: Target absent or already deleted (may be a race, refresh)
    CONFLICT: Duplicate direct chat or invalid state transition
    INTERNAL: Infrastructure failure, opaque to caller, safe to retry
    """

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class ChatErrorCode:
    """Machine-readable error codes returned by chat services."""

    INVALID_ID = "INVALID_ID"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NAME_REQUIRED = "NAME_REQUIRED"
    NOT_GROUP_CHAT = "NOT_GROUP_CHAT"
    NOT_ENOUGH_MEMBERS = "NOT_ENOUGH_MEMBERS"
    TOO_MANY_MEMBERS = "TOO_MANY_MEMBERS"
    INVALID_DIRECT_MEMBERS = "INVALID_DIRECT_MEMBERS"
    UNKNOWN_MEMBERS = "UNKNOWN_MEMBERS"
    NOT_GROUP_ADMIN = "NOT_GROUP_ADMIN"
    NOT_CHAT_MEMBER = "NOT_CHAT_MEMBER"
    CHAT_NOT_FOUND = "CHAT_NOT_FOUND"
    CHAT_EXISTS = "CHAT_EXISTS"
    ADMIN_CANNOT_LEAVE = "ADMIN_CANNOT_LEAVE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_KINDS = {
    ChatErrorCode.INVALID_ID: ChatErrorKind.VALIDATION,
    ChatErrorCode.VALIDATION_ERROR: ChatErrorKind.VALIDATION,
    ChatErrorCode.NAME_REQUIRED: ChatErrorKind.VALIDATION,
    ChatErrorCode.NOT_GROUP_CHAT: ChatErrorKind.VALIDATION,
    ChatErrorCode.NOT_ENOUGH_MEMBERS: ChatErrorKind.VALIDATION,
    ChatErrorCode.TOO_MANY_MEMBERS: ChatErrorKind.VALIDATION,
    ChatErrorCode.INVALID_DIRECT_MEMBERS: ChatErrorKind.VALIDATION,
    ChatErrorCode.UNKNOWN_MEMBERS: ChatErrorKind.VALIDATION,
    ChatErrorCode.NOT_GROUP_ADMIN: ChatErrorKind.AUTHORIZATION,
    ChatErrorCode.NOT_CHAT_MEMBER: ChatErrorKind.AUTHORIZATION,
    ChatErrorCode.CHAT_NOT_FOUND: ChatErrorKind.NOT_FOUND,
    ChatErrorCode.CHAT_EXISTS: ChatErrorKind.CONFLICT,
    ChatErrorCode.ADMIN_CANNOT_LEAVE: ChatErrorKind.CONFLICT,
    ChatErrorCode.INTERNAL_ERROR: ChatErrorKind.INTERNAL,
}

KIND_STATUS = {
    ChatErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ChatErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ChatErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ChatErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ChatErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def kind_for_error_code(error_code: str | None) -> str:
    """Return the error kind for a service error code (unknown codes are internal)."""
    return ERROR_KINDS.get(error_code, ChatErrorKind.INTERNAL)


def status_for_error_code(error_code: str | None) -> int:
    """Return the HTTP status for a service error code."""
    return KIND_STATUS[kind_for_error_code(error_code)]
