"""Checkout app models.

A `CheckoutSession` is the server-issued idempotency key for one cart
snapshot: retries of a submission for the same cart contents reuse it, so a
payment is never taken twice. Every trip to a payment provider is recorded
as a `PaymentAttempt`.
"""

import uuid
from datetime import timedelta
from decimal import Decimal

from catalog.models import TimeStampedModel
from common.choices import CheckoutState, Currency, PaymentMethod, PaymentStatus
from django.conf import settings
from django.db import models
from django.utils import timezone


def default_expiry():
    return timezone.now() + timedelta(hours=getattr(settings, "CHECKOUT_SESSION_TTL_HOURS", 24))


def new_attempt_reference() -> str:
    return f"MH-{uuid.uuid4().hex[:12].upper()}"


class CheckoutSession(TimeStampedModel):
    STATE_EDITING = CheckoutState.EDITING
    STATE_SUBMITTING = CheckoutState.SUBMITTING
    STATE_SUCCEEDED = CheckoutState.SUCCEEDED

    key = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    cart = models.ForeignKey("cart.Cart", related_name="checkout_sessions", on_delete=models.CASCADE)
    cart_fingerprint = models.CharField(max_length=64)
    state = models.CharField(
        max_length=16, choices=CheckoutState.choices, default=CheckoutState.EDITING, db_index=True
    )
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    country = models.CharField(max_length=2, default="US")
    last_error = models.CharField(max_length=255, blank=True)
    order = models.ForeignKey(
        "orders.Order", related_name="checkout_sessions", null=True, blank=True, on_delete=models.SET_NULL
    )
    confirmation = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(default=default_expiry, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["cart", "cart_fingerprint"], name="checkout_cart_fingerprint_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CheckoutSession {self.key} ({self.state})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    def attempt_awaiting_client(self):
        """The attempt parked on a hosted client step (overlay or card widget), if any."""

        return self.attempts.filter(status=PaymentStatus.REQUIRES_ACTION).first()


class PaymentAttempt(TimeStampedModel):
    """One payment try for a checkout session, from intent to terminal status."""

    STATUS_PENDING = PaymentStatus.PENDING
    STATUS_REQUIRES_ACTION = PaymentStatus.REQUIRES_ACTION
    STATUS_SUCCEEDED = PaymentStatus.SUCCEEDED
    STATUS_FAILED = PaymentStatus.FAILED

    session = models.ForeignKey(CheckoutSession, related_name="attempts", on_delete=models.CASCADE)
    reference = models.CharField(max_length=32, unique=True, default=new_attempt_reference)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    method = models.CharField(max_length=16, choices=PaymentMethod.choices)
    # Validated form snapshot: contact, shipping and billing details
    customer = models.JSONField(default=dict, blank=True)
    # Cart lines and totals priced at submission; the order is built from these
    lines = models.JSONField(default=list, blank=True)
    totals = models.JSONField(default=dict, blank=True)
    status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING, db_index=True
    )
    provider = models.CharField(max_length=32, blank=True)
    provider_intent = models.CharField(max_length=128, blank=True)
    provider_reference = models.CharField(max_length=128, blank=True)
    error = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="attempt_amount_non_negative", condition=models.Q(amount__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"PaymentAttempt {self.reference} {self.method} {self.status}"
