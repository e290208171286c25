"""Provider contract shared by every payment backend.

A provider owns one or more payment methods. The checkout drives it in
two steps: `create_intent` registers the payment with the remote service,
then `confirm` settles it from the client's confirmation payload. Both
return plain value objects so the manager can normalize outcomes.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Tuple


class PaymentError(Exception):
    """Raised by providers for failures with a customer-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedPaymentMethod(PaymentError):
    def __init__(self, message: str = "Unsupported payment method"):
        super().__init__(message)


@dataclass
class PaymentRequest:
    reference: str
    amount: Decimal
    currency: str
    method: str
    customer: Dict[str, str] = field(default_factory=dict)
    shipping_address: Dict[str, str] = field(default_factory=dict)
    description: str = ""
    metadata: Dict[str, str] = field(default_factory=dict)

    @property
    def amount_minor(self) -> int:
        """Amount in minor units (cents, paise), rounded half up."""

        return int((Decimal(self.amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class ProviderIntent:
    provider: str
    reference: str
    client_secret: str = ""
    status: str = ""
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    payment_id: str = ""
    payment_method: str = ""
    error: str = ""

    @classmethod
    def succeeded(cls, *, payment_id: str, payment_method: str) -> "PaymentResult":
        return cls(success=True, payment_id=payment_id, payment_method=payment_method)

    @classmethod
    def failed(cls, error: str, *, payment_method: str = "") -> "PaymentResult":
        return cls(success=False, payment_method=payment_method, error=error)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PaymentProvider(ABC):
    """Base class for payment backends registered with the manager."""

    name: str = ""
    methods: Tuple[str, ...] = ()
    # True when the client must run a hosted step (overlay, redirect) between intent and confirm.
    requires_client_action: bool = False

    def is_available(self, currency: str, country: str) -> bool:
        return True

    def supports(self, method: str) -> bool:
        return method in self.methods

    @abstractmethod
    def create_intent(self, request: PaymentRequest) -> ProviderIntent:
        """Register the payment remotely. Raises `PaymentError` on failure."""

    @abstractmethod
    def confirm(self, intent: ProviderIntent, confirmation: Dict[str, Any], request: PaymentRequest) -> PaymentResult:
        """Settle the payment from the client's confirmation payload."""

    def client_params(self, intent: ProviderIntent, request: PaymentRequest) -> Dict[str, Any]:
        """Parameters the client needs to finish a hosted step."""

        return {}
