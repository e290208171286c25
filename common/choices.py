"""Shared enumerations and choices used across apps."""

from django.db import models


class ProductCategory(models.TextChoices):
    PERFUME = "perfume", "Perfume"
    WATCH = "watch", "Watch"
    LIMITED_EDITION = "limited-edition", "Limited edition"


class Currency(models.TextChoices):
    """Currencies the storefront can charge in."""

    USD = "USD", "US Dollar"
    EUR = "EUR", "Euro"
    GBP = "GBP", "Pound Sterling"
    INR = "INR", "Indian Rupee"


class PaymentMethod(models.TextChoices):
    """Payment methods offered at checkout."""

    CARD = "card", "Card"
    UPI = "upi", "UPI"
    WALLET = "wallet", "Wallet"
    BANK_TRANSFER = "bank-transfer", "Bank transfer"
    PAYPAL = "paypal", "PayPal"


class PaymentStatus(models.TextChoices):
    """Lifecycle of a single payment attempt."""

    PENDING = "pending", "Pending"
    REQUIRES_ACTION = "requires_action", "Requires client action"
    SUCCEEDED = "succeeded", "Succeeded"
    FAILED = "failed", "Failed"


class CheckoutState(models.TextChoices):
    """States of a checkout session."""

    EDITING = "editing", "Editing"
    SUBMITTING = "submitting", "Submitting"
    SUCCEEDED = "succeeded", "Succeeded"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders."""

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PAID = "paid", "Paid"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"
    REFUNDED = "refunded", "Refunded"
