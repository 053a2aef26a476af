"""
Django app configuration for artists.
"""

from django.apps import AppConfig


class ArtistsConfig(AppConfig):
    """Configuration for the artists application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "artists"
    verbose_name = "Artists"
