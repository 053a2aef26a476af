"""
Reusable model mixins.

Mixins:
    UUIDPrimaryKeyMixin: UUID primary key instead of an auto-increment integer

Usage:
    from core.models import BaseModel
    from core.model_mixins import UUIDPrimaryKeyMixin

    class PlatformWallet(UUIDPrimaryKeyMixin, BaseModel):
        currency = models.CharField(max_length=3, unique=True)
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Plan, subscription and wallet ids appear in URLs and in payment
    provider metadata, so they must not reveal record counts or order.

    Note:
        The id is assigned in Python before the first save, so `self.pk`
        is already set on unsaved instances. Use `self._state.adding` to
        tell inserts from updates.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier (UUID4)",
    )

    class Meta:
        abstract = True
