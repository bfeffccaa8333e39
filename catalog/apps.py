"""Django app configuration for catalog."""

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """Purchasable products referenced by cart items."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
