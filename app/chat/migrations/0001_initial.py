"""
Initial chat schema.

Tables:
    - chat_chat: Direct and group chats (variant fields checked in the database)
    - chat_member: Memberships with per-member deletion markers
    - chat_direct_pair: One direct chat per unordered user pair
    - chat_message: Messages consulted by chat list visibility
"""

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Chat",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "chat_type",
                    models.CharField(
                        choices=[("direct", "Direct Message"), ("group", "Group")],
                        db_index=True,
                        default="direct",
                        help_text="Type of chat (direct or group)",
                        max_length=10,
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Name for group chats (empty for direct)",
                        max_length=100,
                    ),
                ),
                (
                    "group_picture",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Picture reference for group chats (URL or storage key)",
                        max_length=500,
                    ),
                ),
                (
                    "last_message_at",
                    models.DateTimeField(
                        blank=True,
                        db_index=True,
                        help_text="Timestamp of most recent message (null until the first message)",
                        null=True,
                    ),
                ),
                (
                    "group_admin",
                    models.ForeignKey(
                        blank=True,
                        help_text="Administrator of a group chat (null for direct)",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="administered_chats",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_chat",
                "ordering": ["-updated_at"],
            },
        ),
        migrations.CreateModel(
            name="ChatMember",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "joined_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the user joined this chat",
                    ),
                ),
                (
                    "messages_deleted_at",
                    models.DateTimeField(
                        help_text="Messages up to this time are cleared for this member",
                    ),
                ),
                (
                    "cleared_at",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the member last cleared the chat (null if never)",
                        null=True,
                    ),
                ),
                (
                    "chat",
                    models.ForeignKey(
                        help_text="Chat this membership belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="chat.chat",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="Member of the chat",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="chat_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_member",
                "ordering": ["joined_at", "id"],
            },
        ),
        migrations.AddField(
            model_name="chat",
            name="members",
            field=models.ManyToManyField(
                help_text="Users taking part in this chat",
                related_name="chats",
                through="chat.ChatMember",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
        migrations.CreateModel(
            name="DirectChatPair",
            fields=[
                (
                    "chat",
                    models.OneToOneField(
                        help_text="The direct chat this pair represents",
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="direct_pair",
                        serialize=False,
                        to="chat.chat",
                    ),
                ),
                (
                    "user_lower",
                    models.ForeignKey(
                        help_text="User with lower ID in this chat pair",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "user_higher",
                    models.ForeignKey(
                        help_text="User with higher ID in this chat pair",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_direct_pair",
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "content",
                    models.TextField(blank=True, default="", help_text="Message text"),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True,
                        default=django.utils.timezone.now,
                        help_text="When the message was sent",
                    ),
                ),
                (
                    "chat",
                    models.ForeignKey(
                        help_text="Chat this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.chat",
                    ),
                ),
                (
                    "sender",
                    models.ForeignKey(
                        blank=True,
                        help_text="User who sent this message",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="sent_chat_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddIndex(
            model_name="chat",
            index=models.Index(fields=["-updated_at"], name="chat_chat_updated_idx"),
        ),
        migrations.AddConstraint(
            model_name="chat",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    models.Q(
                        ("chat_type", "group"),
                        ("group_admin__isnull", False),
                        models.Q(("name", ""), _negated=True),
                    ),
                    models.Q(
                        ("chat_type", "direct"),
                        ("group_admin__isnull", True),
                        ("group_picture", ""),
                        ("name", ""),
                    ),
                    _connector="OR",
                ),
                name="chat_variant_fields",
            ),
        ),
        migrations.AddIndex(
            model_name="chatmember",
            index=models.Index(fields=["user", "chat"], name="chat_member_user_idx"),
        ),
        migrations.AddConstraint(
            model_name="chatmember",
            constraint=models.UniqueConstraint(
                fields=("chat", "user"), name="unique_chat_member"
            ),
        ),
        migrations.AddConstraint(
            model_name="chatmember",
            constraint=models.CheckConstraint(
                condition=models.Q(
                    ("messages_deleted_at__gte", models.F("joined_at"))
                ),
                name="chat_member_marker_after_join",
            ),
        ),
        migrations.AddConstraint(
            model_name="directchatpair",
            constraint=models.UniqueConstraint(
                fields=("user_lower", "user_higher"), name="unique_direct_chat_pair"
            ),
        ),
        migrations.AddConstraint(
            model_name="directchatpair",
            constraint=models.CheckConstraint(
                condition=models.Q(("user_lower_id__lt", models.F("user_higher_id"))),
                name="direct_pair_lower_less_than_higher",
            ),
        ),
        migrations.AddIndex(
            model_name="message",
            index=models.Index(
                fields=["chat", "created_at"], name="chat_msg_chat_created_idx"
            ),
        ),
    ]
