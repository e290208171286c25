from decimal import Decimal

import pytest
from checkout.pricing import price_order


@pytest.mark.parametrize(
    "subtotal,shipping,tax,total",
    [
        ("0", "25.00", "0.00", "25.00"),
        ("499.99", "25.00", "40.00", "564.99"),
        ("500", "0.00", "40.00", "540.00"),
        ("500.01", "0.00", "40.00", "540.01"),
        ("600", "0.00", "48.00", "648.00"),
        ("10000", "0.00", "800.00", "10800.00"),
    ],
)
def test_price_order_thresholds(subtotal, shipping, tax, total):
    totals = price_order(Decimal(subtotal))

    assert totals["shipping"] == Decimal(shipping)
    assert totals["tax"] == Decimal(tax)
    assert totals["total"] == Decimal(total)
    assert totals["total"] == totals["subtotal"] + totals["shipping"] + totals["tax"]


def test_tax_rounds_half_up_to_the_cent():
    # 0.08 * 0.0625 = 0.005
    assert price_order(Decimal("0.0625"))["tax"] == Decimal("0.01")
    assert price_order(Decimal("10.06"))["tax"] == Decimal("0.80")
