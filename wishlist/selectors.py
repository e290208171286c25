"""Selectors for read-only wishlist queries."""

from .models import Wishlist


def get_wishlist_for_session(*, session_id: str) -> Wishlist:
    """Return the session's wishlist, creating it if missing."""

    wishlist, _ = Wishlist.objects.get_or_create(session_id=session_id)
    return wishlist


def wishlist_product_ids(*, wishlist: Wishlist) -> list:
    return list(wishlist.items.order_by("created_at", "id").values_list("product_id", flat=True))


def wishlist_products(*, wishlist: Wishlist) -> list:
    """Saved products still on sale, in the order they were saved."""

    return [
        item.product
        for item in wishlist.items.select_related("product").order_by("created_at", "id")
        if item.product.is_active
    ]
