"""Cart app models.

One `Cart` per client profile, keyed by the opaque `X-Session-Id` the
storefront generates and keeps across reloads. Lines carry a snapshot of
the product taken when it was first added, so later catalog price changes
never reach a cart that already holds the product.
"""

from decimal import Decimal

from catalog.models import TimeStampedModel
from common.choices import Currency
from django.db import models


class Cart(TimeStampedModel):
    """Shopping cart bound to a client session."""

    session_id = models.CharField(max_length=64, unique=True)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    # Drawer flag of the storefront; the only UI state persisted with the cart.
    is_open = models.BooleanField(default=False)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Cart#{self.id} ({self.session_id})"


class CartItem(TimeStampedModel):
    """Line item keyed by product and optional size ("" means no size)."""

    cart = models.ForeignKey(Cart, related_name="items", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="cart_items", on_delete=models.CASCADE)
    size = models.CharField(max_length=32, blank=True, default="")
    quantity = models.PositiveIntegerField(default=1)
    # Snapshot taken at add time
    product_name = models.CharField(max_length=200)
    sku = models.CharField(max_length=64, blank=True)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    image_url = models.URLField(max_length=500, blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "product", "size"], name="unique_product_size_per_cart"),
            models.CheckConstraint(
                name="quantity_positive",
                condition=models.Q(quantity__gte=1),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartItem#{self.id} cart={self.cart_id} product={self.product_id} size={self.size!r} qty={self.quantity}"

    @property
    def added_at(self):
        return self.created_at

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price or Decimal("0.00")) * Decimal(int(self.quantity))

    @property
    def line_savings(self) -> Decimal:
        if self.original_price is None or self.original_price <= self.unit_price:
            return Decimal("0.00")
        return (self.original_price - self.unit_price) * Decimal(int(self.quantity))
