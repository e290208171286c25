"""Wishlist services: saving and removing products for a session.

Adding is idempotent and removing an unsaved product is a no-op, so the
storefront heart button can be pressed repeatedly without errors.
"""

import logging

from catalog.selectors import fetch_product
from django.db import transaction

from .models import Wishlist, WishlistItem
from .selectors import get_wishlist_for_session


class WishlistError(Exception):
    """Raised when a product cannot be saved."""

    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


logger = logging.getLogger("maison.wishlist")


def _locked_wishlist(session_id: str) -> Wishlist:
    wishlist = get_wishlist_for_session(session_id=session_id)
    return Wishlist.objects.select_for_update().get(id=wishlist.id)


@transaction.atomic
def add_to_wishlist(*, session_id: str, product_id: int) -> bool:
    """Save a product; returns False when it was already saved."""

    wishlist = _locked_wishlist(session_id)
    if wishlist.items.filter(product_id=product_id).exists():
        return False
    result = fetch_product(product_id=product_id)
    if not result.ok:
        raise WishlistError(result.error or "Unable to update wishlist.", status_code=404 if result.missing else 503)
    WishlistItem.objects.create(wishlist=wishlist, product=result.value)
    wishlist.save(update_fields=["updated_at"])
    logger.info(
        "wishlist.item_added",
        extra={"event": "wishlist.item_added", "session_id": session_id, "product_id": product_id},
    )
    return True


@transaction.atomic
def remove_from_wishlist(*, session_id: str, product_id: int) -> bool:
    """Forget a saved product; returns False when it was not saved."""

    wishlist = _locked_wishlist(session_id)
    deleted, _ = wishlist.items.filter(product_id=product_id).delete()
    if deleted:
        wishlist.save(update_fields=["updated_at"])
        logger.info(
            "wishlist.item_removed",
            extra={"event": "wishlist.item_removed", "session_id": session_id, "product_id": product_id},
        )
    return bool(deleted)


@transaction.atomic
def toggle_wishlist(*, session_id: str, product_id: int) -> bool:
    """Save the product if absent, else remove it. Returns whether it is now saved."""

    if is_in_wishlist(session_id=session_id, product_id=product_id):
        remove_from_wishlist(session_id=session_id, product_id=product_id)
        return False
    add_to_wishlist(session_id=session_id, product_id=product_id)
    return True


def is_in_wishlist(*, session_id: str, product_id: int) -> bool:
    return WishlistItem.objects.filter(wishlist__session_id=session_id, product_id=product_id).exists()


@transaction.atomic
def clear_wishlist(*, session_id: str) -> None:
    wishlist = _locked_wishlist(session_id)
    wishlist.items.all().delete()
    wishlist.save(update_fields=["updated_at"])
    logger.info("wishlist.cleared", extra={"event": "wishlist.cleared", "session_id": session_id})


def get_wishlist_count(*, session_id: str) -> int:
    return WishlistItem.objects.filter(wishlist__session_id=session_id).count()
