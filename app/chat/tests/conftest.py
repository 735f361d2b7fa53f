"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures (alice administers the group; dave belongs to nothing)
- Chat fixtures (a direct chat and a group chat)
- API client helpers for authenticated requests

Usage:
    def test_example(group_chat, alice_client):
        response = alice_client.get(f'/api/v1/chat/chats/{group_chat.id}/')
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import DirectChatFactory, GroupChatFactory


def _client_for(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    """Group admin and member of the direct chat."""
    return UserFactory(profile__first_name="Alice", profile__last_name="Admin")


@pytest.fixture
def bob(db):
    """Member of both the group and the direct chat."""
    return UserFactory(profile__first_name="Bob", profile__last_name="Builder")


@pytest.fixture
def carol(db):
    """Member of the group only."""
    return UserFactory(profile__first_name="Carol", profile__last_name="Singer")


@pytest.fixture
def dave(db):
    """User who is not a member of any fixture chat."""
    return UserFactory(profile__first_name="Dave", profile__last_name="Outsider")


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def direct_chat(db, alice, bob):
    """Direct chat between alice and bob."""
    return DirectChatFactory(members=[alice, bob])


@pytest.fixture
def group_chat(db, alice, bob, carol):
    """Group administered by alice with bob and carol as members."""
    return GroupChatFactory(name="Team", group_admin=alice, members=[bob, carol])


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def alice_client(alice):
    return _client_for(alice)


@pytest.fixture
def bob_client(bob):
    return _client_for(bob)


@pytest.fixture
def carol_client(carol):
    return _client_for(carol)


@pytest.fixture
def dave_client(dave):
    return _client_for(dave)
