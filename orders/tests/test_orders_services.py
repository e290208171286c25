from decimal import Decimal
from unittest.mock import patch

import pytest
from cart.tests.factories import CartFactory, CartItemFactory
from catalog.tests.factories import ProductFactory
from django.core import mail
from orders.models import Order
from orders.services import create_order, notify_order_placed, snapshot_cart_lines, update_order_status
from orders.tests.factories import OrderFactory

TOTALS = {
    "subtotal": Decimal("600.00"),
    "shipping": Decimal("0.00"),
    "tax": Decimal("48.00"),
    "total": Decimal("648.00"),
}


def _order(cart, **kwargs):
    return create_order(
        lines=snapshot_cart_lines(cart),
        currency=cart.currency,
        email="ada@example.com",
        customer_name="Ada Lovelace",
        totals=TOTALS,
        payment_method="card",
        payment_reference="pi_123",
        shipping_address={"address": "1 Rue de la Paix", "city": "Paris"},
        **kwargs,
    )


@pytest.mark.django_db
def test_order_snapshots_cart_lines_and_gets_number():
    cart = CartFactory(currency="EUR")
    product = ProductFactory(price=Decimal("200.00"))
    CartItemFactory(cart=cart, product=product, quantity=3, size="50ml")

    order = _order(cart)

    assert order.number == f"MH-{order.id:06d}"
    assert order.status == Order.STATUS_PAID
    assert order.currency == "EUR"
    assert order.total == Decimal("648.00")
    assert order.billing_address == order.shipping_address
    item = order.items.get()
    assert (item.product_name, item.size, item.quantity) == (product.name, "50ml", 3)
    assert item.line_total == Decimal("600.00")

    # Catalog stock is not touched by order placement
    product.refresh_from_db()
    assert product.stock_count == 10


@pytest.mark.django_db
def test_order_item_survives_product_deletion():
    cart = CartFactory()
    item = CartItemFactory(cart=cart)
    order = _order(cart)

    item.product.delete()

    line = order.items.get()
    assert line.product_id is None
    assert line.product_name


@pytest.mark.django_db
def test_confirmation_email_lists_lines_and_total(settings):
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.FRONTEND_URL = "https://maison.example.com"
    cart = CartFactory()
    CartItemFactory(cart=cart, quantity=2)
    order = _order(cart)

    notify_order_placed(order)

    assert len(mail.outbox) == 1
    msg = mail.outbox[0]
    assert msg.to == ["ada@example.com"]
    assert order.number in msg.subject
    assert "Total: 648.00 USD" in msg.body
    assert f"https://maison.example.com/order-confirmation/{order.number}" in msg.body


@pytest.mark.django_db
def test_email_failure_never_raises():
    cart = CartFactory()
    CartItemFactory(cart=cart)
    order = _order(cart)

    with patch("orders.services.send_order_confirmation_email", side_effect=RuntimeError("smtp down")):
        notify_order_placed(order)


@pytest.mark.django_db
def test_order_moves_through_fulfilment(settings):
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    order = OrderFactory()

    update_order_status(order, status=Order.STATUS_PROCESSING)
    assert len(mail.outbox) == 0
    update_order_status(order, status=Order.STATUS_SHIPPED, tracking_number=" 1Z999AA1 ")
    update_order_status(order, status=Order.STATUS_DELIVERED)

    order.refresh_from_db()
    assert order.status == Order.STATUS_DELIVERED
    assert order.tracking_number == "1Z999AA1"
    assert len(mail.outbox) == 1
    assert "has shipped" in mail.outbox[0].subject
    assert "Tracking number: 1Z999AA1" in mail.outbox[0].body


@pytest.mark.django_db
@pytest.mark.parametrize(
    "start,target",
    [
        (Order.STATUS_CANCELLED, Order.STATUS_PAID),
        (Order.STATUS_REFUNDED, Order.STATUS_SHIPPED),
        (Order.STATUS_SHIPPED, Order.STATUS_CANCELLED),
        (Order.STATUS_DELIVERED, Order.STATUS_PROCESSING),
        (Order.STATUS_PENDING, Order.STATUS_SHIPPED),
    ],
)
def test_disallowed_status_change_raises(start, target):
    order = OrderFactory(status=start)

    with pytest.raises(ValueError):
        update_order_status(order, status=target)

    order.refresh_from_db()
    assert order.status == start


@pytest.mark.django_db
def test_same_status_only_updates_tracking_number(caplog):
    order = OrderFactory(status=Order.STATUS_SHIPPED, tracking_number="OLD")

    with caplog.at_level("INFO", logger="maison.orders"):
        update_order_status(order, status=Order.STATUS_SHIPPED, tracking_number="NEW")

    order.refresh_from_db()
    assert order.tracking_number == "NEW"
    assert not [r for r in caplog.records if getattr(r, "event", "") == "order.status_changed"]


@pytest.mark.django_db
def test_status_change_is_logged(caplog):
    order = OrderFactory()

    with caplog.at_level("INFO", logger="maison.orders"):
        update_order_status(order, status=Order.STATUS_REFUNDED)

    record = next(r for r in caplog.records if getattr(r, "event", "") == "order.status_changed")
    assert (record.status_from, record.status_to) == ("paid", "refunded")
