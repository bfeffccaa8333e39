"""Django app configuration for inventory."""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """On-hand stock and availability lookups."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
