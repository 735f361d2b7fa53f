"""
Tests for ChatVisibilityService.

Groups are always shown. A direct chat is shown to a viewer when it is
fresh (no messages, never cleared by the viewer) or when a message
arrived after the viewer's deletion marker. Anything else is reported
by id as cleared.
"""

from datetime import timedelta

from django.utils import timezone
from freezegun import freeze_time

from chat.models import Chat, ChatMember
from chat.services import ChatService, ChatVisibilityService
from chat.tests.factories import DirectChatFactory, GroupChatFactory, MessageFactory


def _listing(viewer):
    result = ChatVisibilityService.get_chats(viewer)
    assert result.success
    return result.data


def _ids(chats):
    return [chat.id for chat in chats]


class TestFreshChats:
    """Chats without messages."""

    def test_new_chat_visible_to_every_member(self, group_chat, alice, bob, carol):
        for viewer in (alice, bob, carol):
            listing = _listing(viewer)
            assert _ids(listing.updated_chats) == [group_chat.id]
            assert listing.cleared_chats == []

    def test_cleared_empty_chat_hidden_for_clearer_only(self, direct_chat, alice, bob):
        ChatService.clear_chat(bob, direct_chat.id)

        assert _listing(bob).cleared_chats == [direct_chat.id]
        assert _listing(bob).updated_chats == []
        assert _ids(_listing(alice).updated_chats) == [direct_chat.id]

    def test_cleared_group_still_listed(self, group_chat, bob):
        ChatService.clear_chat(bob, group_chat.id)

        listing = _listing(bob)
        assert _ids(listing.updated_chats) == [group_chat.id]
        assert listing.cleared_chats == []

    def test_outsider_sees_nothing(self, group_chat, direct_chat, dave):
        listing = _listing(dave)

        assert listing.updated_chats == []
        assert listing.cleared_chats == []


class TestChatsWithMessages:
    """Chats that have seen messages."""

    def test_message_after_marker_shows_chat(self, direct_chat, alice, bob):
        MessageFactory(chat=direct_chat, sender=bob)

        assert _ids(_listing(alice).updated_chats) == [direct_chat.id]

    def test_clear_then_no_message_hides_chat(self, direct_chat, alice, bob):
        MessageFactory(chat=direct_chat, sender=bob)
        ChatService.clear_chat(alice, direct_chat.id)

        listing = _listing(alice)
        assert listing.updated_chats == []
        assert listing.cleared_chats == [direct_chat.id]
        assert _ids(_listing(bob).updated_chats) == [direct_chat.id]

    def test_clear_then_new_message_shows_chat_again(self, direct_chat, alice, bob):
        MessageFactory(chat=direct_chat, sender=bob)
        ChatService.clear_chat(alice, direct_chat.id)
        marker = ChatMember.objects.get(chat=direct_chat, user=alice).messages_deleted_at

        MessageFactory(chat=direct_chat, sender=bob, created_at=marker + timedelta(seconds=1))

        listing = _listing(alice)
        assert _ids(listing.updated_chats) == [direct_chat.id]
        assert listing.cleared_chats == []

    def test_message_exactly_at_marker_stays_cleared(self, direct_chat, alice, bob):
        ChatService.clear_chat(alice, direct_chat.id)
        marker = ChatMember.objects.get(chat=direct_chat, user=alice).messages_deleted_at

        MessageFactory(chat=direct_chat, sender=bob, created_at=marker)

        assert _listing(alice).cleared_chats == [direct_chat.id]

    def test_each_chat_is_in_exactly_one_list(self, alice, bob, carol):
        shown = GroupChatFactory(group_admin=alice, members=[bob, carol])
        hidden = DirectChatFactory(members=[alice, bob])
        MessageFactory(chat=hidden, sender=bob)
        ChatService.clear_chat(alice, hidden.id)

        listing = _listing(alice)
        shown_ids = set(_ids(listing.updated_chats))
        cleared_ids = set(listing.cleared_chats)
        assert shown_ids == {shown.id}
        assert cleared_ids == {hidden.id}
        assert shown_ids.isdisjoint(cleared_ids)


class TestOrdering:
    """updated_chats keep most-recently-updated-first order."""

    def test_most_recent_activity_first(self, alice, bob, carol):
        older = GroupChatFactory(group_admin=alice, members=[bob, carol])
        newer = DirectChatFactory(members=[alice, bob])
        now = timezone.now()
        MessageFactory(chat=older, sender=bob, created_at=now + timedelta(minutes=2))
        MessageFactory(chat=newer, sender=bob, created_at=now + timedelta(minutes=1))

        assert _ids(_listing(alice).updated_chats) == [older.id, newer.id]


class TestFreshnessHelpers:
    """Unit checks of the two visibility rules."""

    def test_is_fresh_requires_no_messages(self, group_chat, bob):
        membership = group_chat.memberships.get(user=bob)
        assert ChatVisibilityService.is_fresh(group_chat, membership) is True

        MessageFactory(chat=group_chat, sender=bob)
        group_chat.refresh_from_db()

        assert ChatVisibilityService.is_fresh(group_chat, membership) is False

    def test_imported_history_does_not_count_as_activity(self, group_chat, bob):
        Chat.objects.filter(pk=group_chat.pk).update(
            last_message_at=group_chat.created_at - timedelta(days=1)
        )
        group_chat.refresh_from_db()
        membership = group_chat.memberships.get(user=bob)

        assert ChatVisibilityService.is_fresh(group_chat, membership) is True

    def test_has_new_messages_uses_viewer_marker(self, group_chat, alice, bob):
        MessageFactory(chat=group_chat, sender=alice)
        ChatService.clear_chat(bob, group_chat.id)

        bob_membership = ChatMember.objects.get(chat=group_chat, user=bob)
        alice_membership = ChatMember.objects.get(chat=group_chat, user=alice)

        assert ChatVisibilityService.has_new_messages(group_chat, bob_membership) is False
        assert ChatVisibilityService.has_new_messages(group_chat, alice_membership) is True

    def test_group_is_visible_even_when_cleared(self, group_chat, alice, bob):
        MessageFactory(chat=group_chat, sender=alice)
        ChatService.clear_chat(bob, group_chat.id)
        group_chat.refresh_from_db()
        membership = ChatMember.objects.get(chat=group_chat, user=bob)

        assert ChatVisibilityService.has_new_messages(group_chat, membership) is False
        assert ChatVisibilityService.is_visible(group_chat, membership) is True


class TestClearTimeline:
    """Clear at T1, then messages before/after T1, with frozen clocks."""

    def test_no_message_after_clear_stays_cleared(self, alice, bob):
        with freeze_time("2024-03-01 09:00:00"):
            chat = ChatService.create_chat(alice, member_ids=[bob.pk]).data
        with freeze_time("2024-03-01 09:05:00"):
            MessageFactory(chat=chat, sender=bob)
        with freeze_time("2024-03-01 10:00:00"):
            ChatService.clear_chat(alice, chat.id)

        listing = _listing(alice)
        assert listing.updated_chats == []
        assert listing.cleared_chats == [chat.id]

    def test_message_after_clear_revives_chat(self, alice, bob):
        with freeze_time("2024-03-01 09:00:00"):
            chat = ChatService.create_chat(alice, member_ids=[bob.pk]).data
        with freeze_time("2024-03-01 10:00:00"):
            ChatService.clear_chat(alice, chat.id)
        with freeze_time("2024-03-01 10:00:01"):
            MessageFactory(chat=chat, sender=bob)

        listing = _listing(alice)
        assert _ids(listing.updated_chats) == [chat.id]
        assert listing.cleared_chats == []

    def test_clear_on_join_instant_is_reported_cleared(self, alice, bob):
        with freeze_time("2024-03-01 09:00:00"):
            chat = ChatService.create_chat(alice, member_ids=[bob.pk]).data
            ChatService.clear_chat(alice, chat.id)

        membership = ChatMember.objects.get(chat=chat, user=alice)
        assert membership.messages_deleted_at == membership.joined_at
        assert membership.has_cleared is True

        listing = _listing(alice)
        assert listing.updated_chats == []
        assert listing.cleared_chats == [chat.id]
        assert _ids(_listing(bob).updated_chats) == [chat.id]
