"""
Authentication application.

This app provides the viewer identity for chat requests: an email-based
user model, a display profile, and JWT token endpoints.

Key components:
    - User model: Custom email-based user authentication
    - Profile model: Display data used in chat member summaries

Usage:
    from authentication.models import User, Profile
"""
