"""
Factory Boy factories for chat models.

Provides realistic test data generation for:
- Chat: Direct and group chats with their memberships
- ChatMember: Membership with deletion marker
- Message: Messages (bump the chat's last_message_at via signal)

Usage:
    from chat.tests.factories import (
        DirectChatFactory,
        GroupChatFactory,
        ChatMemberFactory,
        MessageFactory,
    )

    # Group administered by a new user, with two more members
    chat = GroupChatFactory(members=[bob, carol])

    # Direct chat between two given users
    chat = DirectChatFactory(members=[alice, bob])

    # A message in a chat
    message = MessageFactory(chat=chat, sender=alice)
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from chat.models import Chat, ChatMember, ChatType, DirectChatPair, Message


class ChatMemberFactory(factory.django.DjangoModelFactory):
    """
    Factory for ChatMember.

    The deletion marker defaults to joined_at (nothing cleared yet).
    """

    class Meta:
        model = ChatMember

    chat = factory.SubFactory("chat.tests.factories.GroupChatFactory")
    user = factory.SubFactory(UserFactory)
    joined_at = factory.LazyFunction(timezone.now)
    messages_deleted_at = factory.SelfAttribute("joined_at")


class GroupChatFactory(factory.django.DjangoModelFactory):
    """
    Factory for group chats.

    The admin is always a member. Pass members=[...] to add more users;
    memberships join at the chat's creation time.

    Examples:
        chat = GroupChatFactory()
        chat = GroupChatFactory(group_admin=alice, members=[bob, carol])
    """

    class Meta:
        model = Chat
        skip_postgeneration_save = True

    chat_type = ChatType.GROUP
    name = factory.Sequence(lambda n: f"Group Chat {n}")
    group_admin = factory.SubFactory(UserFactory)

    @factory.post_generation
    def members(self, create, extracted, **kwargs):
        if not create:
            return
        users = [self.group_admin, *(extracted or [])]
        for user in users:
            ChatMember.objects.get_or_create(
                chat=self,
                user=user,
                defaults={
                    "joined_at": self.created_at,
                    "messages_deleted_at": self.created_at,
                },
            )


class DirectChatFactory(factory.django.DjangoModelFactory):
    """
    Factory for direct chats.

    Pass members=[user_a, user_b]; two new users are created otherwise.
    The canonical DirectChatPair row is created as well.
    """

    class Meta:
        model = Chat
        skip_postgeneration_save = True

    chat_type = ChatType.DIRECT

    @factory.post_generation
    def members(self, create, extracted, **kwargs):
        if not create:
            return
        users = list(extracted) if extracted else [UserFactory(), UserFactory()]
        lower, higher = sorted(users, key=lambda user: user.pk)
        DirectChatPair.objects.create(chat=self, user_lower=lower, user_higher=higher)
        for user in users:
            ChatMember.objects.create(
                chat=self,
                user=user,
                joined_at=self.created_at,
                messages_deleted_at=self.created_at,
            )


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message.

    created_at defaults to now and may be passed explicitly.
    """

    class Meta:
        model = Message

    chat = factory.SubFactory(GroupChatFactory)
    sender = None
    content = factory.Faker("sentence")
