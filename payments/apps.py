"""Django app configuration for payments."""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Payment providers and the manager routing methods to them."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
