"""Payment manager: routes a payment method to the provider that owns it.

The manager holds an ordered provider registry. The order of the registry
is the order methods are offered to the customer. Every provider failure
is normalized into a `PaymentResult`; nothing a provider raises escapes
`confirm` or `process_payment`.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.conf import settings
from django.utils.module_loading import import_string

from .providers.base import (
    PaymentError,
    PaymentProvider,
    PaymentRequest,
    PaymentResult,
    ProviderIntent,
    UnsupportedPaymentMethod,
)

logger = logging.getLogger("maison.payments")

PROCESSING_FAILED = "Payment processing failed"


class PaymentManager:
    def __init__(self, providers: Iterable[PaymentProvider]):
        self.providers: List[PaymentProvider] = list(providers)

    def get_available_payment_methods(self, currency: str, country: str) -> List[str]:
        """Methods offered for a currency/country pair, in registry order."""

        methods: List[str] = []
        for provider in self.providers:
            if not provider.is_available(currency, country):
                continue
            for method in provider.methods:
                if method not in methods:
                    methods.append(method)
        return methods

    def resolve_method(self, selected: Optional[str], currency: str, country: str) -> str:
        """Keep the selected method when it is still offered, else fall back to the first offered one."""

        available = self.get_available_payment_methods(currency, country)
        if not available:
            raise UnsupportedPaymentMethod()
        if selected in available:
            return selected  # type: ignore[return-value]
        return available[0]

    def provider_for(self, method: str, currency: Optional[str] = None, country: Optional[str] = None) -> PaymentProvider:
        for provider in self.providers:
            if not provider.supports(method):
                continue
            if currency is not None and not provider.is_available(currency, country or ""):
                continue
            return provider
        raise UnsupportedPaymentMethod()

    def create_intent(
        self, request: PaymentRequest, *, country: Optional[str] = None
    ) -> Tuple[Optional[ProviderIntent], Optional[PaymentResult]]:
        """Register the payment with its provider.

        Returns `(intent, None)` on success or `(None, failure)` otherwise.
        """

        try:
            provider = self.provider_for(request.method, request.currency, country)
            intent = provider.create_intent(request)
        except PaymentError as exc:
            return None, self._failure(request, exc.message)
        except Exception:
            logger.exception(
                "payments.unexpected_error",
                extra={"event": "payments.unexpected_error", "reference": request.reference, "method": request.method},
            )
            return None, self._failure(request, PROCESSING_FAILED)
        logger.info(
            "payments.intent_created",
            extra={
                "event": "payments.intent_created",
                "provider": provider.name,
                "reference": request.reference,
                "method": request.method,
                "intent": intent.reference,
            },
        )
        return intent, None

    def client_params(self, intent: ProviderIntent, request: PaymentRequest) -> Dict[str, Any]:
        return self._provider_named(intent.provider).client_params(intent, request)

    def requires_client_action(self, intent: ProviderIntent) -> bool:
        return self._provider_named(intent.provider).requires_client_action

    def confirm(self, intent: ProviderIntent, confirmation: Dict[str, Any], request: PaymentRequest) -> PaymentResult:
        try:
            result = self._provider_named(intent.provider).confirm(intent, confirmation or {}, request)
        except PaymentError as exc:
            result = self._failure(request, exc.message)
        except Exception:
            logger.exception(
                "payments.unexpected_error",
                extra={"event": "payments.unexpected_error", "reference": request.reference, "method": request.method},
            )
            result = self._failure(request, PROCESSING_FAILED)
        logger.info(
            "payments.confirmed" if result.success else "payments.failed",
            extra={
                "event": "payments.confirmed" if result.success else "payments.failed",
                "provider": intent.provider,
                "reference": request.reference,
                "method": request.method,
                "payment_id": result.payment_id,
                "error": result.error,
            },
        )
        return result

    def process_payment(
        self, request: PaymentRequest, confirmation: Optional[Dict[str, Any]] = None, *, country: Optional[str] = None
    ) -> PaymentResult:
        """Create and confirm in one pass, for methods whose confirmation is already known."""

        intent, failure = self.create_intent(request, country=country)
        if failure is not None:
            return failure
        return self.confirm(intent, confirmation or {}, request)

    def _provider_named(self, name: str) -> PaymentProvider:
        for provider in self.providers:
            if provider.name == name:
                return provider
        raise UnsupportedPaymentMethod()

    @staticmethod
    def _failure(request: PaymentRequest, error: str) -> PaymentResult:
        return PaymentResult.failed(error, payment_method=request.method)


def get_payment_manager() -> PaymentManager:
    """Build a manager from the `PAYMENT_PROVIDERS` setting (dotted class paths, in offer order)."""

    paths = getattr(settings, "PAYMENT_PROVIDERS", [])
    return PaymentManager(import_string(path)() for path in paths)
