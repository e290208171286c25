"""Review services.

Every write recomputes the product's `rating` and `review_count` so the
catalog listing never averages reviews on read.
"""

import logging
from decimal import Decimal
from typing import Optional

from common.choices import OrderStatus
from django.db import transaction
from django.db.models import Avg, Count, F
from orders.models import OrderItem

from .models import Product, Review

logger = logging.getLogger("maison.catalog")

REVIEW_FIELDS = ("rating", "title", "content")


class ReviewError(Exception):
    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def is_verified_purchase(*, product: Product, email: str) -> bool:
    """True when an order placed with this email contains the product and was not cancelled or refunded."""

    if not email:
        return False
    return (
        OrderItem.objects.filter(product=product, order__email__iexact=email.strip())
        .exclude(order__status__in=[OrderStatus.CANCELLED, OrderStatus.REFUNDED])
        .exists()
    )


def refresh_product_rating(product: Product) -> Product:
    product = Product.objects.select_for_update().get(id=product.id)
    agg = product.reviews.aggregate(avg=Avg("rating"), count=Count("id"))
    product.rating = Decimal(str(agg["avg"] or 0)).quantize(Decimal("0.01"))
    product.review_count = agg["count"]
    product.save(update_fields=["rating", "review_count", "updated_at"])
    return product


@transaction.atomic
def create_review(
    *,
    product: Product,
    session_id: str,
    author_name: str,
    rating: int,
    title: str = "",
    content: str = "",
    email: str = "",
) -> Review:
    """Publish a review; one review per session and product."""

    if Review.objects.filter(product=product, session_id=session_id).exists():
        raise ReviewError("You have already reviewed this product.", status_code=409)
    review = Review.objects.create(
        product=product,
        session_id=session_id,
        author_name=author_name.strip(),
        email=email,
        rating=rating,
        title=title,
        content=content,
        verified_purchase=is_verified_purchase(product=product, email=email),
    )
    refresh_product_rating(product)
    logger.info(
        "review.created",
        extra={
            "event": "review.created",
            "review_id": review.id,
            "product_id": product.id,
            "rating": rating,
            "verified_purchase": review.verified_purchase,
        },
    )
    return review


@transaction.atomic
def update_review(*, product: Product, review_id: int, session_id: str, **changes) -> Review:
    """Edit rating, title or content of a review written by this session."""

    try:
        review = Review.objects.select_for_update().get(id=review_id, product=product)
    except Review.DoesNotExist:
        raise ReviewError("Review not found.", status_code=404)
    if review.session_id != session_id:
        raise ReviewError("You can only edit your own review.", status_code=403)

    fields = [name for name in REVIEW_FIELDS if name in changes]
    for name in fields:
        setattr(review, name, changes[name])
    review.save(update_fields=fields + ["updated_at"])
    if "rating" in fields:
        refresh_product_rating(product)
    logger.info(
        "review.updated",
        extra={"event": "review.updated", "review_id": review.id, "product_id": product.id, "fields": fields},
    )
    return review


def mark_review_helpful(*, product: Product, review_id: int) -> Optional[Review]:
    """Count one more helpful vote; returns None for an unknown review."""

    updated = Review.objects.filter(id=review_id, product=product).update(helpful_count=F("helpful_count") + 1)
    if not updated:
        return None
    return Review.objects.get(id=review_id)
