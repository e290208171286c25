"""Django app configuration for checkout."""

from django.apps import AppConfig


class CheckoutConfig(AppConfig):
    """Checkout sessions, pricing and payment attempts."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "checkout"
