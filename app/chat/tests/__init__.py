"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Chat, ChatMember, DirectChatPair, Message and signals
- test_validators.py: Member set normalization
- test_authorization.py: Group admin and membership predicates
- test_services.py: ChatService lifecycle operations
- test_visibility.py: ChatVisibilityService chat list rules
- test_views.py: REST API endpoint tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_visibility.py
"""
