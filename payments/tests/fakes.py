"""In-memory providers for exercising the manager and checkout without remote calls."""

from payments.providers.base import PaymentError, PaymentProvider, PaymentResult, ProviderIntent


class FakeCardProvider(PaymentProvider):
    """Card provider that succeeds unless the confirmation asks it not to.

    Confirmation payloads:
    - {"payment_method": "pm_ok"} succeeds
    - {"payment_method": "pm_declined"} fails with "Your card was declined."
    - {"payment_method": "pm_processing"} ends in a non-succeeded status
    - {"payment_method": "pm_explode"} raises an unexpected error
    - {"payment_intent": <intent id>} was confirmed by the card widget and succeeds
    """

    name = "fake-card"
    methods = ("card",)

    def __init__(self, *, fail_intent=False):
        self.fail_intent = fail_intent
        self.intents = []
        self.confirmations = []

    def create_intent(self, request):
        if self.fail_intent:
            raise PaymentError("Failed to create payment intent")
        intent = ProviderIntent(
            provider=self.name,
            reference=f"pi_{request.reference}",
            client_secret=f"pi_{request.reference}_secret",
            status="requires_confirmation",
        )
        self.intents.append((intent, request))
        return intent

    def confirm(self, intent, confirmation, request):
        self.confirmations.append((intent, confirmation))
        confirmed_id = confirmation.get("payment_intent")
        if confirmed_id and confirmed_id != intent.reference:
            return PaymentResult.failed("Payment verification failed", payment_method="card")
        token = confirmation.get("payment_method")
        if token == "pm_declined":
            return PaymentResult.failed("Your card was declined.", payment_method="card")
        if token == "pm_processing":
            return PaymentResult.failed("Payment was not completed successfully", payment_method="card")
        if token == "pm_explode":
            raise RuntimeError("socket closed")
        return PaymentResult.succeeded(payment_id=intent.reference, payment_method="card")

    def client_params(self, intent, request):
        return {"client_secret": intent.client_secret}


class FakeRegionalProvider(PaymentProvider):
    """Overlay-style provider available for INR or India."""

    name = "fake-regional"
    methods = ("upi", "wallet", "bank-transfer")
    requires_client_action = True

    def __init__(self):
        self.intents = []

    def is_available(self, currency, country):
        return currency == "INR" or country == "IN"

    def create_intent(self, request):
        intent = ProviderIntent(provider=self.name, reference=f"order_{request.reference}")
        self.intents.append((intent, request))
        return intent

    def client_params(self, intent, request):
        return {"order_id": intent.reference, "amount": request.amount_minor, "method": request.method}

    def confirm(self, intent, confirmation, request):
        if confirmation.get("dismissed"):
            return PaymentResult.failed("Payment cancelled by user", payment_method=request.method)
        if confirmation.get("razorpay_order_id") != intent.reference:
            return PaymentResult.failed("Payment verification failed", payment_method=request.method)
        return PaymentResult.succeeded(payment_id=confirmation["razorpay_payment_id"], payment_method=request.method)


class FakePayPalProvider(PaymentProvider):
    name = "fake-paypal"
    methods = ("paypal",)

    def create_intent(self, request):
        raise PaymentError("PayPal not implemented yet")

    def confirm(self, intent, confirmation, request):
        return PaymentResult.failed("PayPal not implemented yet", payment_method="paypal")
