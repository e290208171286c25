"""Catalog app models.

A single `Product` entity backs the storefront: perfumes, watches and
limited editions share one table and differ only by category.
"""

from common.choices import Currency, ProductCategory
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Sellable catalog product.

    `price` is always the amount charged. `original_price` is an optional
    pre-discount reference shown struck through; it never affects totals.
    """

    CATEGORY_CHOICES = ProductCategory.choices

    name = models.CharField(max_length=200)
    brand = models.CharField(max_length=120, blank=True)
    slug = models.SlugField(max_length=220, unique=True)
    sku = models.CharField(max_length=64, unique=True)
    short_description = models.CharField(max_length=300, blank=True)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, db_index=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, choices=Currency.choices, default=Currency.USD)
    # [{"url": ..., "alt": ..., "is_main": bool, "order": int}, ...]
    images = models.JSONField(default=list, blank=True)
    in_stock = models.BooleanField(default=True)
    stock_count = models.PositiveIntegerField(default=0)
    is_limited_edition = models.BooleanField(default=False)
    is_new_arrival = models.BooleanField(default=False)
    is_bestseller = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True, db_index=True)
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    review_count = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at", "id"]
        constraints = [
            models.CheckConstraint(name="product_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(
                name="product_original_price_non_negative",
                condition=models.Q(original_price__gte=0) | models.Q(original_price__isnull=True),
            ),
        ]
        indexes = [
            models.Index(fields=["category", "is_active"], name="product_category_active_idx"),
            models.Index(fields=["brand"], name="product_brand_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} [{self.sku}]"

    @property
    def main_image_url(self) -> str:
        images = sorted(self.images or [], key=lambda img: img.get("order", 0))
        main = next((img for img in images if img.get("is_main")), None) or (images[0] if images else None)
        return (main or {}).get("url", "")

    @property
    def is_discounted(self) -> bool:
        return self.original_price is not None and self.original_price > self.price


class Review(TimeStampedModel):
    """Customer review of a product.

    Reviewers have no accounts; the `X-Session-Id` that wrote a review is
    the only one allowed to edit it. `verified_purchase` is set when the
    reviewer's email has an order containing the product.
    """

    product = models.ForeignKey(Product, related_name="reviews", on_delete=models.CASCADE)
    session_id = models.CharField(max_length=64, db_index=True)
    author_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    rating = models.PositiveSmallIntegerField()
    title = models.CharField(max_length=200, blank=True)
    content = models.TextField(blank=True)
    verified_purchase = models.BooleanField(default=False)
    helpful_count = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(name="review_rating_range", condition=models.Q(rating__gte=1, rating__lte=5)),
            models.UniqueConstraint(fields=["product", "session_id"], name="unique_review_per_session"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Review#{self.id} product={self.product_id} rating={self.rating}"
