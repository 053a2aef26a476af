"""
Factory Boy factories for artist models.
"""

from decimal import Decimal

import factory

from artists.models import Artist
from authentication.tests.factories import UserFactory


class ArtistFactory(factory.django.DjangoModelFactory):
    """
    Factory for Artist.

    Examples:
        artist = ArtistFactory()
        unmanaged = ArtistFactory(user=None)
    """

    class Meta:
        model = Artist

    user = factory.SubFactory(UserFactory)
    name = factory.Faker("name")
    wallet_balance = Decimal("0")
