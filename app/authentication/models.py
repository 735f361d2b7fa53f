"""
Authentication models.

This module defines the identity models the chat system relies on:
- User: Custom user model with email-based authentication (slim, auth-focused)
- Profile: Display data shown for chat members (OneToOne with User)

Related files:
    - managers.py: Custom user manager for email-based creation
    - signals.py: Auto-create profile on user creation

Security:
    - User passwords hashed with Django's configured hasher
"""

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.models import BaseModel


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Profile data (name, picture, about) lives in the Profile model.

    Fields:
        email: Primary identifier, unique, used for login
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email='user@example.com',
            password='securepassword'
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        """Return the full name from profile, or email if none is set."""
        try:
            return self.profile.full_name or self.email
        except Profile.DoesNotExist:
            return self.email

    def get_short_name(self):
        """Return the first name from profile, or the email local part."""
        try:
            return self.profile.first_name or self.email.split("@")[0]
        except Profile.DoesNotExist:
            return self.email.split("@")[0]


class Profile(BaseModel):
    """
    Display profile for a user.

    Chat responses resolve member ids into these summaries (first name,
    last name, picture, about).

    Fields:
        user: OneToOne link to User (also serves as primary key)
        first_name: User's first name
        last_name: User's last name
        profile_picture: User's profile picture (ImageField)
        about: Short free-text status line

    Note:
        Profile is automatically created via signals when a User is created.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
        primary_key=True,
        help_text="User this profile belongs to",
    )

    first_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="User's first name",
    )
    last_name = models.CharField(
        max_length=150,
        blank=True,
        help_text="User's last name",
    )

    profile_picture = models.ImageField(
        upload_to="profile_pictures/",
        blank=True,
        null=True,
        help_text="User's profile picture",
    )

    about = models.CharField(
        max_length=280,
        blank=True,
        default="",
        help_text="Short status line shown to chat partners",
    )

    class Meta:
        db_table = "authentication_profile"
        verbose_name = "profile"
        verbose_name_plural = "profiles"

    def __str__(self):
        """Return full name or user email."""
        return self.full_name or str(self.user)

    @property
    def full_name(self):
        """Return full name or empty string."""
        return f"{self.first_name} {self.last_name}".strip()
