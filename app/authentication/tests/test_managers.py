"""
Tests for UserManager.

The UserManager provides:
- create_user(): Creates regular users with optional password
- create_superuser(): Creates admin users with elevated privileges
"""

import pytest

from authentication.models import User


class TestUserManagerCreateUser:
    """Tests for UserManager.create_user() method."""

    def test_creates_user_with_email_and_password(self, db):
        """
        Given valid email and password
        When create_user is called
        Then a user is created with those credentials
        """
        user = User.objects.create_user(email="mgr_create@example.com", password="SecurePass123!")

        assert user.pk is not None
        assert user.email == "mgr_create@example.com"
        assert user.check_password("SecurePass123!") is True
        assert user.is_staff is False
        assert user.is_superuser is False

    def test_normalizes_email_domain_to_lowercase(self, db):
        """
        Given an email with uppercase characters in domain
        When create_user is called
        Then the domain portion is normalized to lowercase
        """
        user = User.objects.create_user(email="Test.User@EXAMPLE.COM", password="TestPass123!")

        assert user.email == "Test.User@example.com"

    def test_raises_valueerror_when_email_is_empty(self, db):
        """Empty email is rejected."""
        with pytest.raises(ValueError) as exc_info:
            User.objects.create_user(email="", password="TestPass123!")

        assert "Email field must be set" in str(exc_info.value)

    def test_user_without_password_cannot_log_in(self, db):
        """A user created without a password gets an unusable one."""
        user = User.objects.create_user(email="nopass@example.com")

        assert user.has_usable_password() is False


class TestUserManagerCreateSuperuser:
    """Tests for UserManager.create_superuser() method."""

    def test_creates_superuser_with_staff_flags(self, db):
        """Superusers are staff and superuser."""
        admin = User.objects.create_superuser(email="ops@example.com", password="AdminPass123!")

        assert admin.is_staff is True
        assert admin.is_superuser is True

    def test_rejects_superuser_without_staff_flag(self, db):
        """Explicitly passing is_staff=False is rejected."""
        with pytest.raises(ValueError, match="is_staff=True"):
            User.objects.create_superuser(
                email="ops2@example.com", password="AdminPass123!", is_staff=False
            )
