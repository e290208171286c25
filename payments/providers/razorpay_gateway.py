"""Regional payments (UPI, wallets, bank transfer) through Razorpay.

The gateway runs a hosted overlay in the browser: the server creates an
order, the client opens the overlay with `client_params`, and the overlay's
callback payload is verified here by signature.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from django.conf import settings

from .base import PaymentError, PaymentProvider, PaymentRequest, PaymentResult, ProviderIntent

logger = logging.getLogger("maison.payments")

MERCHANT_NAME = "Maison Heritage"


class RazorpayProvider(PaymentProvider):
    name = "razorpay"
    methods = ("upi", "wallet", "bank-transfer")
    requires_client_action = True

    def __init__(
        self,
        *,
        key_id: Optional[str] = None,
        key_secret: Optional[str] = None,
        currencies: Optional[Iterable[str]] = None,
        countries: Optional[Iterable[str]] = None,
        client=None,
    ):
        self.key_id = key_id if key_id is not None else getattr(settings, "RAZORPAY_KEY_ID", "")
        self.key_secret = key_secret if key_secret is not None else getattr(settings, "RAZORPAY_KEY_SECRET", "")
        self.currencies = {c.upper() for c in (currencies or getattr(settings, "REGIONAL_PAYMENT_CURRENCIES", ["INR"]))}
        self.countries = {c.upper() for c in (countries or getattr(settings, "REGIONAL_PAYMENT_COUNTRIES", ["IN"]))}
        self._client = client

    def is_available(self, currency: str, country: str) -> bool:
        return (currency or "").upper() in self.currencies or (country or "").upper() in self.countries

    @property
    def client(self):
        if self._client is None:
            import razorpay

            self._client = razorpay.Client(auth=(self.key_id, self.key_secret))
        return self._client

    def create_intent(self, request: PaymentRequest) -> ProviderIntent:
        if not self.key_id:
            raise PaymentError("Razorpay not initialized")
        try:
            order = self.client.order.create(
                data={
                    "amount": request.amount_minor,
                    "currency": request.currency.upper(),
                    "receipt": request.reference,
                    "notes": {"reference": request.reference, "method": request.method, **request.metadata},
                }
            )
        except Exception as exc:
            logger.warning(
                "payments.intent_failed",
                extra={"event": "payments.intent_failed", "provider": self.name, "reference": request.reference, "error": str(exc)},
            )
            raise PaymentError("Failed to create payment intent") from exc
        return ProviderIntent(provider=self.name, reference=order["id"], status=order.get("status", ""), raw=dict(order))

    def client_params(self, intent: ProviderIntent, request: PaymentRequest) -> Dict[str, Any]:
        return {
            "key": self.key_id,
            "amount": request.amount_minor,
            "currency": request.currency.upper(),
            "name": MERCHANT_NAME,
            "description": f"Order #{request.reference}",
            "order_id": intent.reference,
            "method": request.method,
            "prefill": {
                "name": request.customer.get("name", ""),
                "email": request.customer.get("email", ""),
                "contact": request.customer.get("phone", ""),
            },
        }

    def confirm(self, intent: ProviderIntent, confirmation: Dict[str, Any], request: PaymentRequest) -> PaymentResult:
        if confirmation.get("dismissed"):
            return PaymentResult.failed("Payment cancelled by user", payment_method=request.method)

        payment_id = confirmation.get("razorpay_payment_id")
        order_id = confirmation.get("razorpay_order_id")
        signature = confirmation.get("razorpay_signature")
        if not (payment_id and order_id and signature) or order_id != intent.reference:
            return PaymentResult.failed("Payment verification failed", payment_method=request.method)
        try:
            self.client.utility.verify_payment_signature(
                {
                    "razorpay_order_id": order_id,
                    "razorpay_payment_id": payment_id,
                    "razorpay_signature": signature,
                }
            )
        except Exception as exc:
            logger.warning(
                "payments.signature_rejected",
                extra={
                    "event": "payments.signature_rejected",
                    "provider": self.name,
                    "reference": request.reference,
                    "error": str(exc),
                },
            )
            return PaymentResult.failed("Payment verification failed", payment_method=request.method)
        return PaymentResult.succeeded(payment_id=payment_id, payment_method=request.method)
