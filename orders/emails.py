"""Email utilities for the orders app.

Uses Django's email backend, with links composed from FRONTEND_URL.
"""

from django.conf import settings
from django.core.mail import send_mail


def send_order_confirmation_email(order) -> None:
    """Send the order confirmation to the customer.

    Lists each line and the totals, with a link to the storefront's
    confirmation page when `FRONTEND_URL` is set.
    """
    if not order.email:
        return

    subject = f"Your Maison Heritage order {order.number} is confirmed"
    lines = "\n".join(
        f"  {item.quantity} x {item.product_name}{f' ({item.size})' if item.size else ''}  {item.line_total}"
        for item in order.items.all()
    )
    frontend = getattr(settings, "FRONTEND_URL", "")
    link = f"\nView your order: {frontend.rstrip('/')}/order-confirmation/{order.number}\n" if frontend else ""

    body = (
        f"Thank you for your purchase, {order.customer_name or order.email}!\n\n"
        f"Order: {order.number}\n"
        f"{lines}\n\n"
        f"Subtotal: {order.subtotal} {order.currency}\n"
        f"Shipping: {order.shipping} {order.currency}\n"
        f"Tax: {order.tax} {order.currency}\n"
        f"Total: {order.total} {order.currency}\n"
        f"{link}"
    )

    send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [order.email],
        fail_silently=True,
    )


def send_order_shipped_email(order) -> None:
    """Tell the customer their order is on its way, with the tracking number when known."""
    if not order.email:
        return

    subject = f"Your Maison Heritage order {order.number} has shipped"
    tracking = f"Tracking number: {order.tracking_number}\n" if order.tracking_number else ""
    frontend = getattr(settings, "FRONTEND_URL", "")
    link = f"\nView your order: {frontend.rstrip('/')}/order-confirmation/{order.number}\n" if frontend else ""

    body = (
        f"Good news, {order.customer_name or order.email}!\n\n"
        f"Order {order.number} is on its way.\n"
        f"{tracking}"
        f"{link}"
    )

    send_mail(
        subject,
        body,
        getattr(settings, "DEFAULT_FROM_EMAIL", None),
        [order.email],
        fail_silently=True,
    )
