import logging
from decimal import Decimal
from typing import Iterable, Optional

from cart.models import Cart, CartItem
from catalog.models import Product
from django.db import transaction

from .emails import send_order_confirmation_email, send_order_shipped_email
from .models import Order, OrderItem

logger = logging.getLogger("maison.orders")


def snapshot_cart_lines(cart: Cart) -> list:
    """JSON-safe copy of the cart lines, in the order they were added."""

    return [
        {
            "product_id": item.product_id,
            "product_name": item.product_name,
            "sku": item.sku,
            "size": item.size,
            "quantity": int(item.quantity),
            "unit_price": str(item.unit_price),
        }
        for item in CartItem.objects.filter(cart=cart).order_by("created_at", "id")
    ]


def create_order(
    *,
    lines: Iterable[dict],
    email: str,
    currency: str,
    totals: dict,
    payment_method: str,
    payment_reference: str = "",
    customer_name: str = "",
    phone: str = "",
    shipping_address: Optional[dict] = None,
    billing_address: Optional[dict] = None,
) -> Order:
    """Create a paid Order and its OrderItems from a line snapshot.

    Catalog stock counts are left untouched.
    """

    lines = list(lines)
    # Lines whose product has since been deleted keep their snapshot only
    known_products = set(
        Product.objects.filter(id__in=[line.get("product_id") for line in lines]).values_list("id", flat=True)
    )

    with transaction.atomic():
        order = Order.objects.create(
            email=email,
            customer_name=customer_name,
            phone=phone,
            currency=currency,
            subtotal=Decimal(str(totals["subtotal"])),
            shipping=Decimal(str(totals["shipping"])),
            tax=Decimal(str(totals["tax"])),
            total=Decimal(str(totals["total"])),
            payment_method=payment_method,
            payment_reference=payment_reference,
            shipping_address=shipping_address or {},
            billing_address=billing_address or shipping_address or {},
            status=Order.STATUS_PAID,
        )
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product_id=line.get("product_id") if line.get("product_id") in known_products else None,
                    product_name=line["product_name"],
                    sku=line.get("sku", ""),
                    size=line.get("size", ""),
                    quantity=int(line["quantity"]),
                    unit_price=Decimal(str(line["unit_price"])),
                )
                for line in lines
            ]
        )
        # Generate user-friendly order number (unique)
        order.number = f"MH-{int(order.id):06d}"
        order.save(update_fields=["number"])
    logger.info(
        "order.created",
        extra={
            "event": "order.created",
            "order_id": order.id,
            "number": order.number,
            "total": str(order.total),
            "payment_method": payment_method,
        },
    )
    return order


def notify_order_placed(order: Order) -> None:
    """Send the confirmation email; failures are logged and never raised."""

    try:
        send_order_confirmation_email(order)
    except Exception:
        logger.warning(
            "order.email_failed",
            extra={"event": "order.email_failed", "order_id": order.id},
            exc_info=True,
        )


# Statuses an order may move to from each status; cancelled and refunded are final.
ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {Order.STATUS_CONFIRMED, Order.STATUS_PAID, Order.STATUS_CANCELLED},
    Order.STATUS_CONFIRMED: {Order.STATUS_PAID, Order.STATUS_PROCESSING, Order.STATUS_CANCELLED},
    Order.STATUS_PAID: {Order.STATUS_PROCESSING, Order.STATUS_SHIPPED, Order.STATUS_CANCELLED, Order.STATUS_REFUNDED},
    Order.STATUS_PROCESSING: {Order.STATUS_SHIPPED, Order.STATUS_CANCELLED, Order.STATUS_REFUNDED},
    Order.STATUS_SHIPPED: {Order.STATUS_DELIVERED, Order.STATUS_REFUNDED},
    Order.STATUS_DELIVERED: {Order.STATUS_REFUNDED},
    Order.STATUS_CANCELLED: set(),
    Order.STATUS_REFUNDED: set(),
}


def update_order_status(order: Order, *, status: str, tracking_number: Optional[str] = None) -> Order:
    """Move an order along its fulfilment lifecycle.

    Setting the current status again only updates the tracking number.
    Raises ValueError for a move the lifecycle does not allow. The customer
    is emailed when the order ships.
    """

    prev = order.status
    if status != prev and status not in ALLOWED_TRANSITIONS.get(prev, set()):
        raise ValueError(f"Cannot change a {prev} order to {status}")

    fields = ["updated_at"]
    if tracking_number is not None:
        order.tracking_number = tracking_number.strip()
        fields.append("tracking_number")
    if status != prev:
        order.status = status
        fields.append("status")
    order.save(update_fields=fields)

    if status == prev:
        return order
    logger.info(
        "order.status_changed",
        extra={
            "event": "order.status_changed",
            "order_id": order.id,
            "number": order.number,
            "status_from": prev,
            "status_to": order.status,
        },
    )
    if order.status == Order.STATUS_SHIPPED:
        try:
            send_order_shipped_email(order)
        except Exception:
            logger.warning(
                "order.email_failed",
                extra={"event": "order.email_failed", "order_id": order.id},
                exc_info=True,
            )
    return order
