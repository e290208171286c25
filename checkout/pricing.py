"""Order pricing: shipping threshold and flat-rate tax."""

from decimal import ROUND_HALF_UP, Decimal

FREE_SHIPPING_THRESHOLD = Decimal("500")
FLAT_SHIPPING = Decimal("25.00")
TAX_RATE = Decimal("0.08")
CENTS = Decimal("0.01")


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)


def price_order(subtotal) -> dict:
    """Return subtotal, shipping, tax and total for a cart subtotal.

    Shipping is free from 500 upwards. Tax is 8% of the subtotal, rounded
    half up to the cent.
    """

    subtotal = quantize(Decimal(subtotal))
    shipping = Decimal("0.00") if subtotal >= FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
    tax = quantize(subtotal * TAX_RATE)
    return {
        "subtotal": subtotal,
        "shipping": shipping,
        "tax": tax,
        "total": subtotal + shipping + tax,
    }
