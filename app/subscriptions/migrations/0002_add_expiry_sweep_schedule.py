"""
Add celery-beat schedule for the subscription expiry sweep.

This migration creates the periodic task schedule for the
expire_lapsed_subscriptions task, which runs every hour to expire
active subscriptions past their end date and abandon unpaid ones.
"""

from django.conf import settings
from django.db import migrations

TASK_NAME = "Expire Lapsed Subscriptions"


def create_periodic_task(apps, schema_editor):
    """Create the periodic task for the expiry sweep."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule, _ = IntervalSchedule.objects.get_or_create(
        every=getattr(settings, "SUBSCRIPTION_EXPIRY_SWEEP_INTERVAL_MINUTES", 60),
        period="minutes",
    )

    PeriodicTask.objects.get_or_create(
        name=TASK_NAME,
        defaults={
            "task": "subscriptions.tasks.expire_lapsed_subscriptions",
            "interval": schedule,
            "enabled": True,
            "description": (
                "Expires active subscriptions whose end date has passed and "
                "cancels pending subscriptions that were never paid."
            ),
        },
    )


def remove_periodic_task(apps, schema_editor):
    """Remove the periodic task on migration rollback."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    PeriodicTask.objects.filter(name=TASK_NAME).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("subscriptions", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_task, remove_periodic_task),
    ]
