"""
Tests for ArtistWalletService.
"""

import uuid
from decimal import Decimal

import pytest

from artists.exceptions import ArtistNotFoundError
from artists.services import ArtistWalletService
from artists.tests.factories import ArtistFactory
from core.exceptions import ValidationError


class TestArtistWalletCredit:
    """Tests for ArtistWalletService.credit()."""

    def test_credit_increments_balance(self, db):
        """Credit adds the exact decimal amount."""
        artist = ArtistFactory()

        balance = ArtistWalletService.credit(artist.id, Decimal("7.992"))

        artist.refresh_from_db()
        assert balance == Decimal("7.992")
        assert artist.wallet_balance == Decimal("7.992")

    def test_credits_accumulate(self, db):
        """Successive credits add up without losing updates."""
        artist = ArtistFactory(wallet_balance=Decimal("1.5"))

        ArtistWalletService.credit(artist.id, Decimal("2.25"))
        ArtistWalletService.credit(artist.id, Decimal("0.25"))

        artist.refresh_from_db()
        assert artist.wallet_balance == Decimal("4.0")

    def test_unknown_artist_raises_not_found(self, db):
        """No row matched means the artist does not exist."""
        with pytest.raises(ArtistNotFoundError):
            ArtistWalletService.credit(uuid.uuid4(), Decimal("1.00"))

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1"), "abc"])
    def test_rejects_non_positive_or_invalid_amounts(self, db, amount):
        """Zero, negative and non-numeric amounts are caller errors."""
        artist = ArtistFactory()

        with pytest.raises(ValidationError):
            ArtistWalletService.credit(artist.id, amount)

        artist.refresh_from_db()
        assert artist.wallet_balance == Decimal("0")


class TestArtistLookup:
    """Tests for ArtistWalletService.get_artist()."""

    def test_returns_existing_artist(self, db):
        artist = ArtistFactory()

        assert ArtistWalletService.get_artist(artist.id) == artist

    def test_missing_artist_raises(self, db):
        with pytest.raises(ArtistNotFoundError) as exc_info:
            ArtistWalletService.get_artist(uuid.uuid4())

        assert exc_info.value.status_code == 404


class TestArtistManagement:
    """Tests for Artist.is_managed_by()."""

    def test_owner_and_staff_can_manage(self, db):
        from authentication.tests.factories import UserFactory

        artist = ArtistFactory()
        staff = UserFactory(is_staff=True)
        stranger = UserFactory()

        assert artist.is_managed_by(artist.user) is True
        assert artist.is_managed_by(staff) is True
        assert artist.is_managed_by(stranger) is False
