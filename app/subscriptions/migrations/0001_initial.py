import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.db.models.expressions
import django.utils.timezone
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("artists", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="PlatformWallet",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        choices=[
                            ("USD", "US Dollar"),
                            ("EUR", "Euro"),
                            ("GBP", "British Pound"),
                            ("NGN", "Nigerian Naira"),
                            ("GHS", "Ghanaian Cedi"),
                            ("KES", "Kenyan Shilling"),
                            ("ZAR", "South African Rand"),
                        ],
                        max_length=3,
                        unique=True,
                    ),
                ),
                (
                    "balance",
                    models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=20),
                ),
                ("version", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "platform_wallets",
                "ordering": ["currency"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(balance__gte=0),
                        name="platform_wallet_balance_non_negative",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="WalletTransaction",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=4, max_digits=20)),
                (
                    "currency",
                    models.CharField(
                        choices=[
                            ("USD", "US Dollar"),
                            ("EUR", "Euro"),
                            ("GBP", "British Pound"),
                            ("NGN", "Nigerian Naira"),
                            ("GHS", "Ghanaian Cedi"),
                            ("KES", "Kenyan Shilling"),
                            ("ZAR", "South African Rand"),
                        ],
                        max_length=3,
                    ),
                ),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("subscription", "Subscription"),
                            ("withdrawal", "Withdrawal"),
                            ("refund", "Refund"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                (
                    "reference",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        default="",
                        help_text="External reference (provider transaction id, withdrawal id)",
                        max_length=255,
                    ),
                ),
                (
                    "timestamp",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                (
                    "wallet",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="subscriptions.platformwallet",
                    ),
                ),
            ],
            options={
                "db_table": "platform_wallet_transactions",
                "ordering": ["-timestamp"],
                "indexes": [
                    models.Index(
                        fields=["wallet", "-timestamp"],
                        name="platform_wa_wallet__3c1f0e_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="SubscriptionPlan",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=120)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "price_amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Price per subscription period",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0"))],
                    ),
                ),
                (
                    "price_currency",
                    models.CharField(
                        choices=[
                            ("USD", "US Dollar"),
                            ("EUR", "Euro"),
                            ("GBP", "British Pound"),
                            ("NGN", "Nigerian Naira"),
                            ("GHS", "Ghanaian Cedi"),
                            ("KES", "Kenyan Shilling"),
                            ("ZAR", "South African Rand"),
                        ],
                        default="USD",
                        max_length=3,
                    ),
                ),
                (
                    "benefits",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="List of benefit descriptions shown to fans",
                    ),
                ),
                (
                    "duration_days",
                    models.PositiveIntegerField(
                        default=30,
                        help_text="Length of one subscription period in days",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                (
                    "split_platform_percent",
                    models.PositiveSmallIntegerField(
                        default=20,
                        validators=[django.core.validators.MaxValueValidator(100)],
                    ),
                ),
                (
                    "split_artist_percent",
                    models.PositiveSmallIntegerField(
                        default=80,
                        validators=[django.core.validators.MaxValueValidator(100)],
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("subscriber_count", models.PositiveIntegerField(default=0)),
                (
                    "artist",
                    models.ForeignKey(
                        help_text="Artist offering this plan",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="plans",
                        to="artists.artist",
                    ),
                ),
            ],
            options={
                "db_table": "subscription_plans",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["artist", "is_active"],
                        name="subscriptio_artist__8d2a41_idx",
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            split_artist_percent=django.db.models.expressions.CombinedExpression(
                                models.Value(100),
                                "-",
                                models.F("split_platform_percent"),
                            )
                        ),
                        name="plan_split_sums_to_100",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(price_amount__gte=0),
                        name="plan_price_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(duration_days__gte=1),
                        name="plan_duration_at_least_one_day",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserSubscription",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("pending", "Pending"),
                            ("active", "Active"),
                            ("cancelled", "Cancelled"),
                            ("expired", "Expired"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("start_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("end_date", models.DateTimeField()),
                ("auto_renew", models.BooleanField(default=True)),
                ("cancellation_date", models.DateTimeField(blank=True, null=True)),
                ("last_renewal_date", models.DateTimeField(blank=True, null=True)),
                ("next_renewal_date", models.DateTimeField(blank=True, null=True)),
                (
                    "version",
                    models.PositiveIntegerField(
                        default=1,
                        help_text="Version for optimistic locking - incremented on each save",
                    ),
                ),
                (
                    "artist",
                    models.ForeignKey(
                        help_text="Copied from plan.artist when the subscription is created",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="subscriptions",
                        to="artists.artist",
                    ),
                ),
                (
                    "plan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="subscriptions",
                        to="subscriptions.subscriptionplan",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="subscriptions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "user_subscriptions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["user", "status"],
                        name="user_subscr_user_id_5b7e2c_idx",
                    ),
                    models.Index(
                        fields=["status", "end_date"],
                        name="user_subscr_status_a41d93_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(status="active"),
                        fields=("user", "artist"),
                        name="unique_active_subscription_per_artist",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentRecord",
            fields=[
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier (UUID4)",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "currency",
                    models.CharField(
                        choices=[
                            ("USD", "US Dollar"),
                            ("EUR", "Euro"),
                            ("GBP", "British Pound"),
                            ("NGN", "Nigerian Naira"),
                            ("GHS", "Ghanaian Cedi"),
                            ("KES", "Kenyan Shilling"),
                            ("ZAR", "South African Rand"),
                        ],
                        max_length=3,
                    ),
                ),
                ("payment_method", models.CharField(max_length=50)),
                ("transaction_id", models.CharField(db_index=True, max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("success", "Success"),
                            ("failed", "Failed"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "subscription",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payment_history",
                        to="subscriptions.usersubscription",
                    ),
                ),
            ],
            options={
                "db_table": "subscription_payments",
                "ordering": ["timestamp", "created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("transaction_id", "pending"), _negated=True),
                        fields=("transaction_id",),
                        name="unique_payment_transaction_id",
                    )
                ],
            },
        ),
    ]
