"""
Authentication application.

Provides the email-identified User model used by subscribers, artist
account holders and staff. API clients obtain JWTs through the
simplejwt token endpoints mounted in config.urls.
"""
