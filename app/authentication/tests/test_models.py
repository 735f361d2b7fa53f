"""
Tests for authentication models, manager and signals.

Covers:
- UserManager.create_user / create_superuser
- Profile auto-creation on user creation
- Display name helpers used in chat member summaries
"""

import pytest

from authentication.models import Profile, User
from authentication.tests.factories import UserFactory


class TestUserManager:
    """Tests for UserManager creation helpers."""

    def test_create_user_normalizes_email_domain(self, db):
        user = User.objects.create_user(email="Someone@EXAMPLE.com", password="x1y2z3!!")

        assert user.email == "Someone@example.com"
        assert user.check_password("x1y2z3!!")

    def test_create_user_without_password_is_unusable(self, db):
        user = User.objects.create_user(email="nopass@example.com")

        assert user.has_usable_password() is False

    def test_create_user_requires_email(self, db):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="whatever")

    def test_create_superuser_sets_flags(self, superuser):
        assert superuser.is_staff is True
        assert superuser.is_superuser is True

    def test_create_superuser_rejects_non_staff(self, db):
        with pytest.raises(ValueError):
            User.objects.create_superuser(
                email="bad@example.com", password="pw", is_staff=False
            )


class TestProfileSignal:
    """Profiles are created automatically for new users."""

    def test_profile_created_for_new_user(self, db):
        user = User.objects.create_user(email="fresh@example.com", password="pw")

        assert Profile.objects.filter(user=user).exists()

    def test_profile_not_duplicated_on_user_update(self, db):
        user = User.objects.create_user(email="again@example.com", password="pw")
        user.is_staff = True
        user.save()

        assert Profile.objects.filter(user=user).count() == 1


class TestDisplayNames:
    """Name helpers fall back to the email address."""

    def test_full_name_from_profile(self, db):
        user = UserFactory(profile__first_name="Ada", profile__last_name="Lovelace")

        assert user.get_full_name() == "Ada Lovelace"
        assert user.get_short_name() == "Ada"

    def test_full_name_falls_back_to_email(self, db):
        user = UserFactory(profile__first_name="", profile__last_name="")

        assert user.get_full_name() == user.email
        assert user.get_short_name() == user.email.split("@")[0]

    def test_profile_factory_refreshes_cached_profile(self, db):
        user = UserFactory(profile__first_name="Grace", profile__last_name="Hopper")

        assert user.profile.first_name == "Grace"
        assert user.profile.pk == Profile.objects.get(user=user).pk
