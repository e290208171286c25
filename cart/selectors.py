"""Selectors for read-only cart queries."""

from decimal import Decimal

from .models import Cart


def get_active_cart_for_session(*, session_id: str) -> Cart:
    """Return the session's cart, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(session_id=session_id)
    return cart


def cart_totals(*, cart: Cart):
    """Compute cart totals from the current lines.

    Totals are never stored; every read sums the line set again.
    """

    total_items = 0
    total_price = Decimal("0.00")
    savings = Decimal("0.00")
    for item in cart.items.all():
        total_items += int(item.quantity)
        total_price += item.line_total
        savings += item.line_savings
    return {
        "total_items": total_items,
        "total_price": total_price,
        "savings": savings,
    }


def cart_fingerprint_lines(*, cart: Cart):
    """Stable (product, size, quantity, unit price) tuples describing the cart contents."""

    return [
        (item.product_id, item.size, int(item.quantity), str(item.unit_price))
        for item in cart.items.order_by("product_id", "size")
    ]
