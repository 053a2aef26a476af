"""
Artist-specific exceptions.
"""

from __future__ import annotations

from core.exceptions import NotFoundError


class ArtistNotFoundError(NotFoundError):
    """Raised when an artist id does not match any artist."""

    default_error_code: str = "ARTIST_NOT_FOUND"
