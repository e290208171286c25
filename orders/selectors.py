"""Read-only order lookups."""

import logging

from common.results import QueryResult, run_query

from .models import Order

logger = logging.getLogger("maison.orders")


def fetch_order_for_customer(*, number: str, email: str) -> QueryResult[Order]:
    """Return the order with this number when it was placed with this email.

    A wrong email is reported exactly like an unknown number.
    """

    def query():
        if not email:
            raise Order.DoesNotExist
        return Order.objects.prefetch_related("items").get(number=number, email__iexact=email.strip())

    return run_query(query, not_found="Order not found.", logger=logger)


def fetch_order(*, number: str) -> QueryResult[Order]:
    return run_query(
        lambda: Order.objects.prefetch_related("items").get(number=number), not_found="Order not found.", logger=logger
    )
