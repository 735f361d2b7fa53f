"""
Tests for the JWT token endpoints.

The chat API authenticates viewers with the access token issued here.
"""

from rest_framework import status

TOKEN_URL = "/api/v1/auth/token/"
TOKEN_REFRESH_URL = "/api/v1/auth/token/refresh/"


class TestTokenObtain:
    """Tests for POST /api/v1/auth/token/."""

    def test_returns_token_pair_for_valid_credentials(self, user, api_client):
        response = api_client.post(
            TOKEN_URL,
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
        assert "refresh" in response.data

    def test_rejects_wrong_password(self, user, api_client):
        response = api_client.post(
            TOKEN_URL,
            {"email": user.email, "password": "wrong"},
            format="json",
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_refresh_issues_new_access_token(self, user, api_client):
        pair = api_client.post(
            TOKEN_URL,
            {"email": user.email, "password": "TestPass123!"},
            format="json",
        ).data

        response = api_client.post(
            TOKEN_REFRESH_URL, {"refresh": pair["refresh"]}, format="json"
        )

        assert response.status_code == status.HTTP_200_OK
        assert "access" in response.data
