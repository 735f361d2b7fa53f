"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: UserManager, Profile auto-creation, display names
- test_views.py: JWT token obtain/refresh endpoints

Usage:
    pytest authentication/tests/
"""
