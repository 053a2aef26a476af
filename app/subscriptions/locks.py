"""
Optimistic locking for subscription updates.

Cancellation can race with a renewal or activation webhook. Callers pass
the version they last read; check_version() locks the row only if that
version is still current, otherwise the write is rejected instead of
silently overwriting the other update.

Usage:
    from subscriptions.locks import check_version

    with transaction.atomic():
        subscription = check_version(UserSubscription, subscription_id, expected_version=3)
        subscription.auto_renew = False
        subscription.save()  # Version auto-increments to 4
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from django.db import models, transaction

from core.exceptions import NotFoundError
from subscriptions.exceptions import StaleRecordError

if TYPE_CHECKING:
    from typing import Any

T = TypeVar("T", bound=models.Model)


def check_version(
    model_class: type[T],
    pk: Any,
    expected_version: int,
) -> T:
    """
    Atomically check version and lock a record for update.

    Args:
        model_class: Django model class (must have 'version' field)
        pk: Primary key of the record
        expected_version: Version the caller expects

    Returns:
        The locked model instance

    Raises:
        StaleRecordError: If version doesn't match (concurrent modification)
        NotFoundError: If record doesn't exist

    Note:
        Must be called within a transaction context. The lock is held
        until the outer transaction commits or rolls back.
    """
    with transaction.atomic():
        instance = (
            model_class.objects.select_for_update()
            .filter(pk=pk, version=expected_version)
            .first()
        )

        if instance is None:
            current_version = (
                model_class.objects.filter(pk=pk).values_list("version", flat=True).first()
            )
            model_name = model_class.__name__
            if current_version is None:
                raise NotFoundError(
                    f"{model_name} {pk} not found",
                    error_code=f"{model_name.upper()}_NOT_FOUND",
                    details={"pk": str(pk)},
                )

            raise StaleRecordError(
                f"{model_name} {pk} has been modified "
                f"(expected version {expected_version}, current {current_version})",
                details={
                    "pk": str(pk),
                    "expected_version": expected_version,
                    "current_version": current_version,
                },
            )

        return instance


__all__ = [
    "check_version",
]
