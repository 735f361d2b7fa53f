"""
Tests for ChatAuthorizationService.

Covers:
- is_group_admin for groups and direct chats
- is_member and get_membership with and without preloaded memberships
"""

from django.db import connection
from django.test.utils import CaptureQueriesContext

from chat.authorization import ChatAuthorizationService
from chat.models import Chat


class TestIsGroupAdmin:
    def test_admin_of_group(self, group_chat, alice):
        assert ChatAuthorizationService.is_group_admin(group_chat, alice.pk) is True

    def test_member_is_not_admin(self, group_chat, bob):
        assert ChatAuthorizationService.is_group_admin(group_chat, bob.pk) is False

    def test_direct_chat_has_no_admin(self, direct_chat, alice, bob):
        assert ChatAuthorizationService.is_group_admin(direct_chat, alice.pk) is False
        assert ChatAuthorizationService.is_group_admin(direct_chat, bob.pk) is False


class TestIsMember:
    def test_members(self, group_chat, alice, bob, carol):
        for user in (alice, bob, carol):
            assert ChatAuthorizationService.is_member(group_chat, user.pk) is True

    def test_non_member(self, group_chat, dave):
        assert ChatAuthorizationService.is_member(group_chat, dave.pk) is False

    def test_get_membership_returns_marker_row(self, group_chat, bob):
        membership = ChatAuthorizationService.get_membership(group_chat, bob.pk)

        assert membership.user_id == bob.pk
        assert membership.messages_deleted_at == membership.joined_at

    def test_uses_preloaded_memberships(self, group_chat, carol, dave):
        chat = Chat.objects.with_members().get(pk=group_chat.pk)

        with CaptureQueriesContext(connection) as queries:
            assert ChatAuthorizationService.is_member(chat, carol.pk) is True
            assert ChatAuthorizationService.is_member(chat, dave.pk) is False

        assert len(queries) == 0
