"""Django app configuration for the Wishlist app."""

from django.apps import AppConfig


class WishlistConfig(AppConfig):
    """AppConfig for the session wishlist."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "wishlist"
