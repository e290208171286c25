from .base import (
    PaymentError,
    PaymentProvider,
    PaymentRequest,
    PaymentResult,
    ProviderIntent,
    UnsupportedPaymentMethod,
)
from .card import StripeCardProvider
from .paypal import PayPalProvider
from .razorpay_gateway import RazorpayProvider

__all__ = [
    "PaymentError",
    "PaymentProvider",
    "PaymentRequest",
    "PaymentResult",
    "ProviderIntent",
    "UnsupportedPaymentMethod",
    "StripeCardProvider",
    "PayPalProvider",
    "RazorpayProvider",
]
