"""Card payments through Stripe PaymentIntents."""

import logging
from typing import Any, Dict, Optional

import stripe
from django.conf import settings

from .base import PaymentError, PaymentProvider, PaymentRequest, PaymentResult, ProviderIntent

logger = logging.getLogger("maison.payments")


class StripeCardProvider(PaymentProvider):
    """Creates a PaymentIntent and settles it with the card widget's payment method.

    The client may also confirm the intent itself with the returned client
    secret; `confirm` then only retrieves the intent and checks its status.
    Only the `succeeded` status counts as paid.
    """

    name = "stripe"
    methods = ("card",)

    def __init__(self, *, api_key: Optional[str] = None, publishable_key: Optional[str] = None):
        self.api_key = api_key if api_key is not None else getattr(settings, "STRIPE_SECRET_KEY", "")
        self.publishable_key = (
            publishable_key if publishable_key is not None else getattr(settings, "STRIPE_PUBLISHABLE_KEY", "")
        )

    def create_intent(self, request: PaymentRequest) -> ProviderIntent:
        if not self.api_key:
            raise PaymentError("Stripe not initialized")
        params = {
            "amount": request.amount_minor,
            "currency": request.currency.lower(),
            "payment_method_types": ["card"],
            "description": request.description or f"Order #{request.reference}",
            "metadata": {"reference": request.reference, **request.metadata},
        }
        if request.customer.get("email"):
            params["receipt_email"] = request.customer["email"]
        try:
            # The attempt reference doubles as the Stripe idempotency key.
            intent = stripe.PaymentIntent.create(
                **params, idempotency_key=f"intent-{request.reference}", api_key=self.api_key
            )
        except stripe.StripeError as exc:
            logger.warning(
                "payments.intent_failed",
                extra={"event": "payments.intent_failed", "provider": self.name, "reference": request.reference, "error": str(exc)},
            )
            raise PaymentError("Failed to create payment intent") from exc
        return ProviderIntent(
            provider=self.name,
            reference=intent.id,
            client_secret=intent.client_secret or "",
            status=intent.status or "",
        )

    def confirm(self, intent: ProviderIntent, confirmation: Dict[str, Any], request: PaymentRequest) -> PaymentResult:
        payment_method = confirmation.get("payment_method")
        confirmed_id = confirmation.get("payment_intent")
        if confirmed_id and confirmed_id != intent.reference:
            return PaymentResult.failed("Payment verification failed", payment_method="card")
        try:
            if payment_method:
                pi = stripe.PaymentIntent.confirm(intent.reference, payment_method=payment_method, api_key=self.api_key)
            else:
                pi = stripe.PaymentIntent.retrieve(intent.reference, api_key=self.api_key)
        except stripe.StripeError as exc:
            logger.info(
                "payments.card_declined",
                extra={"event": "payments.card_declined", "provider": self.name, "reference": request.reference, "error": str(exc)},
            )
            return PaymentResult.failed(getattr(exc, "user_message", None) or "Payment failed", payment_method="card")
        if pi.status != "succeeded":
            return PaymentResult.failed("Payment was not completed successfully", payment_method="card")
        return PaymentResult.succeeded(payment_id=pi.id, payment_method="card")

    def client_params(self, intent: ProviderIntent, request: PaymentRequest) -> Dict[str, Any]:
        return {"publishable_key": self.publishable_key, "client_secret": intent.client_secret}
