"""Django app configuration for the product catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Perfumes, watches and limited editions offered by the storefront."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
    verbose_name = "Catalog"
