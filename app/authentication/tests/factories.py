"""
Factory Boy factories for authentication models.

Provides realistic test data generation for:
- User: Custom user model with email-based authentication
- Profile: Display profile (auto-created by signal, updated by factory)

Usage:
    from authentication.tests.factories import UserFactory, ProfileFactory

    # Create a user with default values (empty profile)
    user = UserFactory()

    # Create a user whose profile carries a name
    user = UserFactory(profile__first_name="Ada", profile__last_name="Lovelace")
"""

import factory

from authentication.models import Profile, User


class ProfileFactory(factory.django.DjangoModelFactory):
    """
    Factory for Profile model.

    Uses get_or_create on user because the post_save signal already
    created an empty profile for every new user.
    """

    class Meta:
        model = Profile
        django_get_or_create = ("user",)

    user = factory.SubFactory("authentication.tests.factories.UserFactory")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    about = ""

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Fill in the signal-created profile instead of ignoring the fields."""
        profile = super()._create(model_class, *args, **kwargs)
        # user.profile still caches the empty instance the signal created
        kwargs["user"].profile = profile
        changed = False
        for field_name in ("first_name", "last_name", "about"):
            if field_name in kwargs and getattr(profile, field_name) != kwargs[field_name]:
                setattr(profile, field_name, kwargs[field_name])
                changed = True
        if changed:
            profile.save()
        return profile


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Examples:
        # Basic user
        user = UserFactory()

        # Staff user
        user = UserFactory(is_staff=True)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    is_active = True
    is_staff = False

    profile = factory.RelatedFactory(ProfileFactory, factory_related_name="user")

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )
