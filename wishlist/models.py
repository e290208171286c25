"""Wishlist app models.

Like the cart, a wishlist belongs to the client profile named by the
`X-Session-Id` header. It only remembers which products were saved and in
which order.
"""

from catalog.models import TimeStampedModel
from django.db import models


class Wishlist(TimeStampedModel):
    session_id = models.CharField(max_length=64, unique=True)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Wishlist#{self.id} ({self.session_id})"


class WishlistItem(TimeStampedModel):
    """A saved product; each product appears at most once per wishlist."""

    wishlist = models.ForeignKey(Wishlist, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="wishlist_items", on_delete=models.CASCADE)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["wishlist", "product"], name="unique_product_per_wishlist"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"WishlistItem#{self.id} wishlist={self.wishlist_id} product={self.product_id}"
