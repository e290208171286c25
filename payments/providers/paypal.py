"""PayPal placeholder: offered everywhere, never able to take a payment."""

from typing import Any, Dict

from .base import PaymentError, PaymentProvider, PaymentRequest, PaymentResult, ProviderIntent


class PayPalProvider(PaymentProvider):
    name = "paypal"
    methods = ("paypal",)

    def create_intent(self, request: PaymentRequest) -> ProviderIntent:
        raise PaymentError("PayPal not implemented yet")

    def confirm(self, intent: ProviderIntent, confirmation: Dict[str, Any], request: PaymentRequest) -> PaymentResult:
        return PaymentResult.failed("PayPal not implemented yet", payment_method="paypal")
