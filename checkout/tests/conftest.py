from decimal import Decimal

import pytest
from cart.tests.factories import CartFactory, CartItemFactory
from catalog.tests.factories import ProductFactory
from payments.manager import PaymentManager
from payments.tests.fakes import FakeCardProvider, FakePayPalProvider, FakeRegionalProvider

FAKE_PROVIDERS = [
    "payments.tests.fakes.FakeCardProvider",
    "payments.tests.fakes.FakeRegionalProvider",
    "payments.tests.fakes.FakePayPalProvider",
]


@pytest.fixture
def card_provider():
    return FakeCardProvider()


@pytest.fixture
def manager(card_provider):
    return PaymentManager([card_provider, FakeRegionalProvider(), FakePayPalProvider()])


@pytest.fixture
def filled_cart(db):
    """Cart for session `guest-1` holding two units at 300.00 (subtotal 600.00)."""

    cart = CartFactory(session_id="guest-1")
    CartItemFactory(cart=cart, product=ProductFactory(price=Decimal("300.00")), quantity=2)
    return cart


@pytest.fixture
def form():
    return {
        "email": "ada@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address": "12 Analytical Row",
        "city": "London",
        "state": "Greater London",
        "zip_code": "NW1 6XE",
        "country": "US",
        "phone": "+1 555 0100",
        "currency": "USD",
        "payment_method": "card",
        "card_payment_method": "pm_ok",
    }
