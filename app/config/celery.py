"""
Celery configuration for the Django application.

Celery runs the periodic subscription expiry sweep
(subscriptions.tasks.expire_lapsed_subscriptions). The schedule itself is
stored in the database by django-celery-beat.

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Looks for a tasks.py module in each installed app
app.autodiscover_tasks()
