"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ChatViewSet: Chat listing, lifecycle and per-viewer clear

URL Structure:
    /api/v1/chat/chats/                GET, POST
    /api/v1/chat/chats/{id}/           GET, PUT, DELETE
    /api/v1/chat/chats/{id}/leave/     POST
    /api/v1/chat/chats/{id}/clear/     POST

Design Decisions:
    - Views handle HTTP concerns only; every rule lives in chat.services
    - Service failures map to a status through the error kind
      (validation 400, authorization 403, not_found 404, conflict 409)
    - Unexpected exceptions are logged and returned as an opaque 500
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import exceptions, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.services import ServiceResult

from chat.constants import ChatErrorCode, ChatErrorKind, kind_for_error_code, status_for_error_code
from chat.serializers import (
    ChatCreateSerializer,
    ChatListingSerializer,
    ChatSerializer,
    ErrorResponseSerializer,
    GroupUpdateSerializer,
)
from chat.services import ChatService, ChatVisibilityService

logger = logging.getLogger(__name__)


def error_response(result: ServiceResult) -> Response:
    """Render a failed ServiceResult as the error envelope."""
    body = result.to_response()
    body["kind"] = kind_for_error_code(result.error_code)
    return Response(body, status=status_for_error_code(result.error_code))


def invalid_input_response(errors: dict) -> Response:
    """Render serializer errors as a validation error envelope."""
    result = ServiceResult.failure(
        "Invalid request data",
        error_code=ChatErrorCode.VALIDATION_ERROR,
        errors=errors,
    )
    return error_response(result)


ERROR_RESPONSES = {
    400: OpenApiResponse(ErrorResponseSerializer, description="Validation error"),
    403: OpenApiResponse(ErrorResponseSerializer, description="Not allowed"),
    404: OpenApiResponse(ErrorResponseSerializer, description="Chat not found"),
}


@extend_schema_view(
    list=extend_schema(
        operation_id="list_chats",
        summary="List chats",
        responses={200: ChatListingSerializer},
        tags=["Chat"],
    ),
    create=extend_schema(
        operation_id="create_chat",
        summary="Create chat",
        request=ChatCreateSerializer,
        responses={
            201: ChatSerializer,
            400: ERROR_RESPONSES[400],
            409: OpenApiResponse(ErrorResponseSerializer, description="Chat already exists"),
        },
        tags=["Chat"],
    ),
    retrieve=extend_schema(
        operation_id="get_chat",
        summary="Get chat",
        responses={200: ChatSerializer, 400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
        tags=["Chat"],
    ),
    update=extend_schema(
        operation_id="update_group",
        summary="Update group members, name and picture",
        request=GroupUpdateSerializer,
        responses={200: ChatSerializer, **ERROR_RESPONSES},
        tags=["Chat"],
    ),
    destroy=extend_schema(
        operation_id="delete_chat",
        summary="Delete chat",
        responses={200: ChatSerializer, **ERROR_RESPONSES},
        tags=["Chat"],
    ),
)
class ChatViewSet(viewsets.ViewSet):
    """
    ViewSet for chat operations.

    list:
        The viewer's chats split into updated_chats (to display) and
        cleared_chats (ids the viewer cleared with nothing new since).

    create:
        Create a direct chat (one other member) or a group chat
        (is_group, a name and at least two other members).

    retrieve:
        Get a chat the viewer belongs to.

    update:
        Replace a group's members, name and picture. Group admin only.

    destroy:
        Delete a chat for everyone. Group admin only for groups; either
        member for direct chats. Returns the deleted chat.

    leave:
        Leave a group. The admin cannot leave.

    clear:
        Hide the chat's current history for the viewer only.
    """

    permission_classes = [IsAuthenticated]
    # Malformed ids reach the view and are rejected as INVALID_ID
    lookup_value_regex = "[^/]+"

    def handle_exception(self, exc):
        if isinstance(exc, (exceptions.APIException, Http404, PermissionDenied)):
            return super().handle_exception(exc)

        logger.exception(
            f"Unhandled error in chat API ({self.request.method} {self.request.path})"
        )
        return Response(
            {
                "success": False,
                "error": "Internal server error",
                "error_code": ChatErrorCode.INTERNAL_ERROR,
                "kind": ChatErrorKind.INTERNAL,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    def _chat_response(self, result: ServiceResult, status_code=status.HTTP_200_OK) -> Response:
        if not result.success:
            return error_response(result)
        serializer = ChatSerializer(result.data, context={"request": self.request})
        return Response(serializer.data, status=status_code)

    def list(self, request):
        """List the viewer's chats."""
        result = ChatVisibilityService.get_chats(request.user)
        if not result.success:
            return error_response(result)

        serializer = ChatListingSerializer(result.data, context={"request": request})
        return Response(serializer.data)

    def create(self, request):
        """Create a direct or group chat."""
        serializer = ChatCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer.errors)

        data = serializer.validated_data
        result = ChatService.create_chat(
            request.user,
            member_ids=data["members"],
            name=data.get("name"),
            is_group=data.get("is_group", False),
        )
        return self._chat_response(result, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        """Get a chat."""
        return self._chat_response(ChatService.get_chat(request.user, pk))

    def update(self, request, pk=None):
        """Replace a group's members, name and picture."""
        serializer = GroupUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer.errors)

        data = serializer.validated_data
        result = ChatService.update_group(
            request.user,
            pk,
            member_ids=data["members"],
            name=data.get("name"),
            group_picture=data.get("group_picture"),
        )
        return self._chat_response(result)

    def destroy(self, request, pk=None):
        """Delete a chat for every member."""
        return self._chat_response(ChatService.delete_chat(request.user, pk))

    @extend_schema(
        operation_id="leave_group",
        summary="Leave group",
        request=None,
        responses={
            200: ChatSerializer,
            **ERROR_RESPONSES,
            409: OpenApiResponse(ErrorResponseSerializer, description="Admin cannot leave"),
        },
        tags=["Chat"],
    )
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        """Leave a group chat."""
        return self._chat_response(ChatService.leave_group(request.user, pk))

    @extend_schema(
        operation_id="clear_chat",
        summary="Clear chat for the current user",
        request=None,
        responses={200: ChatSerializer, 400: ERROR_RESPONSES[400], 404: ERROR_RESPONSES[404]},
        tags=["Chat"],
    )
    @action(detail=True, methods=["post"])
    def clear(self, request, pk=None):
        """Clear the chat's history for the viewer."""
        return self._chat_response(ChatService.clear_chat(request.user, pk))
