"""Cart services: mutations of a session's cart.

Every mutation is a transaction on the session's own cart row, so two
sessions never share state. Totals are derived by `selectors.cart_totals`.
"""

import logging
from typing import Optional

from catalog.selectors import fetch_product
from django.db import transaction

from .models import Cart, CartItem
from .selectors import get_active_cart_for_session


class CartError(Exception):
    """Raised for cart mutation failures."""

    status_code = 400

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


logger = logging.getLogger("maison.cart")


def _locked_cart(session_id: str) -> Cart:
    cart = get_active_cart_for_session(session_id=session_id)
    return Cart.objects.select_for_update().get(id=cart.id)


def _line_lookup(cart: Cart, product_id: int, size: Optional[str]):
    return CartItem.objects.select_for_update().filter(cart=cart, product_id=product_id, size=size or "")


@transaction.atomic
def add_item(*, session_id: str, product_id: int, quantity: int = 1, size: Optional[str] = None) -> CartItem:
    """Add a product to the session's cart.

    An existing line with the same (product, size) has its quantity increased;
    its snapshot is kept. Otherwise a new line snapshots name, price, original
    price, sku and main image. Opens the cart drawer.
    """

    if quantity <= 0:
        raise CartError("Quantity must be positive")
    cart = _locked_cart(session_id)
    size = size or ""

    item = _line_lookup(cart, product_id, size).first()
    if item is not None:
        item.quantity = int(item.quantity) + quantity
        item.save(update_fields=["quantity", "updated_at"])
        event = "cart.item_updated"
    else:
        result = fetch_product(product_id=product_id)
        if not result.ok:
            raise CartError(result.error or "Unable to update cart.", status_code=404 if result.missing else 503)
        product = result.value
        item = CartItem.objects.create(
            cart=cart,
            product=product,
            size=size,
            quantity=quantity,
            product_name=product.name,
            sku=product.sku,
            unit_price=product.price,
            original_price=product.original_price,
            image_url=product.main_image_url,
        )
        event = "cart.item_added"

    cart.is_open = True
    cart.save(update_fields=["is_open", "updated_at"])
    logger.info(
        event,
        extra={
            "event": event,
            "cart_id": cart.id,
            "session_id": session_id,
            "product_id": product_id,
            "size": size,
            "quantity": int(item.quantity),
        },
    )
    return item


@transaction.atomic
def remove_item(*, session_id: str, product_id: int, size: Optional[str] = None) -> None:
    """Delete the matching line; no-op if absent."""

    cart = _locked_cart(session_id)
    deleted, _ = _line_lookup(cart, product_id, size).delete()
    if not deleted:
        return
    cart.save(update_fields=["updated_at"])
    logger.info(
        "cart.item_removed",
        extra={
            "event": "cart.item_removed",
            "cart_id": cart.id,
            "session_id": session_id,
            "product_id": product_id,
            "size": size or "",
        },
    )


@transaction.atomic
def update_quantity(*, session_id: str, product_id: int, quantity: int, size: Optional[str] = None) -> Optional[CartItem]:
    """Set a line's quantity exactly; a quantity of zero or less removes it.

    Returns the updated line, or None when the line was removed or absent.
    """

    if quantity <= 0:
        remove_item(session_id=session_id, product_id=product_id, size=size)
        return None
    cart = _locked_cart(session_id)
    item = _line_lookup(cart, product_id, size).first()
    if item is None:
        return None
    item.quantity = quantity
    item.save(update_fields=["quantity", "updated_at"])
    cart.save(update_fields=["updated_at"])
    logger.info(
        "cart.item_updated",
        extra={
            "event": "cart.item_updated",
            "cart_id": cart.id,
            "session_id": session_id,
            "product_id": product_id,
            "size": size or "",
            "quantity": quantity,
        },
    )
    return item


@transaction.atomic
def clear_cart(*, session_id: str) -> None:
    """Empty the cart and close the drawer."""

    cart = _locked_cart(session_id)
    clear_cart_instance(cart=cart)
    logger.info(
        "cart.cleared",
        extra={"event": "cart.cleared", "cart_id": cart.id, "session_id": session_id},
    )


def clear_cart_instance(*, cart: Cart) -> None:
    """Clear an already-loaded cart; used after a successful order."""

    CartItem.objects.filter(cart=cart).delete()
    cart.is_open = False
    cart.save(update_fields=["is_open", "updated_at"])


@transaction.atomic
def toggle_cart(*, session_id: str) -> bool:
    """Flip the drawer flag and return its new value."""

    cart = _locked_cart(session_id)
    cart.is_open = not cart.is_open
    cart.save(update_fields=["is_open", "updated_at"])
    return cart.is_open


@transaction.atomic
def set_currency(*, session_id: str, currency: str) -> Cart:
    cart = _locked_cart(session_id)
    if cart.currency != currency:
        cart.currency = currency
        cart.save(update_fields=["currency", "updated_at"])
    return cart


def get_item_count(*, session_id: str, product_id: int, size: Optional[str] = None) -> int:
    """Quantity held for (product, size), zero when absent."""

    item = CartItem.objects.filter(
        cart__session_id=session_id, product_id=product_id, size=size or ""
    ).first()
    return int(item.quantity) if item else 0
