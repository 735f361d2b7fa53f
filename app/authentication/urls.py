"""
URL configuration for authentication app.

URL structure:
    /api/v1/auth/token/           - Obtain access/refresh pair (email + password)
    /api/v1/auth/token/refresh/   - Exchange a refresh token for a new access token

The access token is sent as "Authorization: Bearer <token>" on chat requests;
the authenticated user becomes the viewer of every chat operation.
"""

from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

app_name = "authentication"

urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
]
