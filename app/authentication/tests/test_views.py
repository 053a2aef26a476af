"""
Tests for the JWT token endpoints used by API clients.
"""

import pytest
from django.urls import reverse

from authentication.tests.factories import UserFactory


@pytest.mark.django_db
class TestTokenObtainView:
    """Tests for POST /api/v1/auth/token/."""

    def test_returns_access_and_refresh_tokens(self, api_client):
        """Valid credentials yield a token pair."""
        UserFactory(email="listener@example.com", password="Listen123!")

        response = api_client.post(
            reverse("token_obtain_pair"),
            {"email": "listener@example.com", "password": "Listen123!"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data

    def test_rejects_wrong_password(self, api_client):
        """Invalid credentials are rejected with 401."""
        UserFactory(email="listener2@example.com", password="Listen123!")

        response = api_client.post(
            reverse("token_obtain_pair"),
            {"email": "listener2@example.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == 401

    def test_access_token_authenticates_api_requests(self, api_client):
        """The issued access token works as a Bearer credential."""
        user = UserFactory(email="listener3@example.com", password="Listen123!")
        tokens = api_client.post(
            reverse("token_obtain_pair"),
            {"email": "listener3@example.com", "password": "Listen123!"},
            format="json",
        ).data

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access']}")
        response = api_client.get(
            reverse("subscriptions:active-subscriptions", kwargs={"user_id": user.pk})
        )

        assert response.status_code == 200
