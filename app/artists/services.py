"""
Artist wallet service.

The artist wallet is owned by the Artist row. Reconciliation calls
ArtistWalletService.credit() inside its own transaction, so the credit
commits or rolls back together with the payment status change.

Usage:
    from artists.services import ArtistWalletService

    new_balance = ArtistWalletService.credit(artist.id, Decimal("7.992"))
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from django.db.models import F
from django.utils import timezone

from artists.exceptions import ArtistNotFoundError
from artists.models import Artist
from core.exceptions import ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    import uuid


class ArtistWalletService(BaseService):
    """Lookups and atomic balance updates for artist wallets."""

    @classmethod
    def get_artist(cls, artist_id: uuid.UUID) -> Artist:
        """
        Get an artist by id.

        Raises:
            ArtistNotFoundError: If the artist does not exist
        """
        artist = Artist.objects.filter(id=artist_id).first()
        if artist is None:
            raise ArtistNotFoundError(
                f"Artist {artist_id} not found",
                details={"artist_id": str(artist_id)},
            )
        return artist

    @classmethod
    def credit(cls, artist_id: uuid.UUID, amount: Decimal) -> Decimal:
        """
        Atomically add amount to the artist's wallet.

        The increment is one UPDATE statement, so concurrent credits never
        lose each other's writes.

        Returns:
            The wallet balance after the credit

        Raises:
            ValidationError: If amount is not a positive number
            ArtistNotFoundError: If no artist row matched
        """
        try:
            amount = Decimal(amount)
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError(
                "Credit amount must be a number",
                error_code="INVALID_AMOUNT",
                details={"amount": str(amount)},
            )
        if not amount.is_finite() or amount <= 0:
            raise ValidationError(
                "Credit amount must be positive",
                error_code="INVALID_AMOUNT",
                details={"amount": str(amount)},
            )

        rows = Artist.objects.filter(id=artist_id).update(
            wallet_balance=F("wallet_balance") + amount,
            updated_at=timezone.now(),
        )
        if rows == 0:
            raise ArtistNotFoundError(
                f"Artist {artist_id} not found",
                details={"artist_id": str(artist_id)},
            )

        balance = Artist.objects.values_list("wallet_balance", flat=True).get(id=artist_id)
        cls.get_logger().info(
            "Artist wallet credited",
            extra={
                "artist_id": str(artist_id),
                "amount": str(amount),
                "balance": str(balance),
            },
        )
        return balance
