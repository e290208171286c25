"""Selectors for the catalog domain.

Read-only query helpers shared by the API and the cart. Each selector
returns a `QueryResult` so a failing data store is never mistaken for an
empty catalog.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from common.results import QueryResult, run_query
from django.db.models import Count, Q, QuerySet

from .models import Product

logger = logging.getLogger("maison.catalog")


def active_products() -> QuerySet[Product]:
    return Product.objects.filter(is_active=True)


def fetch_products(
    *,
    category: Optional[str] = None,
    brand: Optional[str] = None,
    search: Optional[str] = None,
    in_stock: Optional[bool] = None,
    price_min: Optional[Decimal] = None,
    price_max: Optional[Decimal] = None,
    ordering: Optional[Iterable[str]] = None,
) -> QueryResult[list]:
    """Return active products matching the given filters.

    An in-stock filter requires both the `in_stock` flag and a positive stock count.
    """

    def query():
        qs = active_products()
        if category:
            qs = qs.filter(category=category)
        if brand:
            qs = qs.filter(brand__iexact=brand)
        if in_stock:
            qs = qs.filter(in_stock=True, stock_count__gt=0)
        if price_min is not None:
            qs = qs.filter(price__gte=price_min)
        if price_max is not None:
            qs = qs.filter(price__lte=price_max)
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(brand__icontains=search) | Q(description__icontains=search))
        return list(qs.order_by(*list(ordering or ("-created_at", "id"))))

    return run_query(query, logger=logger)


def fetch_product(*, slug: Optional[str] = None, product_id: Optional[int] = None) -> QueryResult[Product]:
    """Return a single active product by slug or id."""

    if slug is None and product_id is None:
        raise ValueError("slug or product_id is required")
    lookup = {"slug": slug} if slug is not None else {"id": product_id}
    return run_query(lambda: active_products().get(**lookup), not_found="Product not found.", logger=logger)


def fetch_reviews(*, product: Product) -> QueryResult[list]:
    """Reviews of a product, newest first."""

    return run_query(lambda: list(product.reviews.order_by("-created_at", "-id")), logger=logger)


def review_summary(*, product: Product) -> QueryResult[dict]:
    """Average rating, review count and the number of reviews per star."""

    def query():
        distribution = {str(stars): 0 for stars in range(5, 0, -1)}
        for row in product.reviews.values("rating").annotate(count=Count("id")):
            distribution[str(row["rating"])] = row["count"]
        return {
            "average_rating": product.rating,
            "total_reviews": product.review_count,
            "rating_distribution": distribution,
        }

    return run_query(query, logger=logger)
