"""
Test configuration and fixtures for authentication tests.
"""

import pytest
from rest_framework.test import APIClient

from authentication.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """A regular active user."""
    return UserFactory()


@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()
