"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, api_client):
        response = api_client.post('/api/v1/auth/token/', {...})
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from authentication.models import User
from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """Create a basic user with a named profile."""
    return UserFactory(profile__first_name="Test", profile__last_name="User")


@pytest.fixture
def superuser(db):
    """Create a superuser with admin privileges."""
    return User.objects.create_superuser(
        email="admin@example.com",
        password="AdminPass123!",
    )


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()
