import uuid
from decimal import Decimal

import checkout.models
import django.db.models.deletion
from django.db import migrations, models

CURRENCY_CHOICES = [("USD", "US Dollar"), ("EUR", "Euro"), ("GBP", "Pound Sterling"), ("INR", "Indian Rupee")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("cart", "0001_initial"),
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="CheckoutSession",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("key", models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ("cart_fingerprint", models.CharField(max_length=64)),
                (
                    "state",
                    models.CharField(
                        choices=[("editing", "Editing"), ("submitting", "Submitting"), ("succeeded", "Succeeded")],
                        db_index=True,
                        default="editing",
                        max_length=16,
                    ),
                ),
                ("currency", models.CharField(choices=CURRENCY_CHOICES, default="USD", max_length=3)),
                ("country", models.CharField(default="US", max_length=2)),
                ("last_error", models.CharField(blank=True, max_length=255)),
                ("confirmation", models.JSONField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(db_index=True, default=checkout.models.default_expiry)),
                (
                    "cart",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="checkout_sessions", to="cart.cart"
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="checkout_sessions",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["cart", "cart_fingerprint"], name="checkout_cart_fingerprint_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentAttempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reference",
                    models.CharField(default=checkout.models.new_attempt_reference, max_length=32, unique=True),
                ),
                ("amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("currency", models.CharField(choices=CURRENCY_CHOICES, default="USD", max_length=3)),
                (
                    "method",
                    models.CharField(
                        choices=[
                            ("card", "Card"),
                            ("upi", "UPI"),
                            ("wallet", "Wallet"),
                            ("bank-transfer", "Bank transfer"),
                            ("paypal", "PayPal"),
                        ],
                        max_length=16,
                    ),
                ),
                ("customer", models.JSONField(blank=True, default=dict)),
                ("lines", models.JSONField(blank=True, default=list)),
                ("totals", models.JSONField(blank=True, default=dict)),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("succeeded", "Succeeded"), ("failed", "Failed")],
                        db_index=True,
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("provider", models.CharField(blank=True, max_length=32)),
                ("provider_intent", models.CharField(blank=True, max_length=128)),
                ("provider_reference", models.CharField(blank=True, max_length=128)),
                ("error", models.CharField(blank=True, max_length=255)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to="checkout.checkoutsession",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gte", 0)), name="attempt_amount_non_negative")
                ],
            },
        ),
    ]
