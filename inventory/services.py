"""Inventory services (single-location): stock availability with caching."""

import logging

from common.hooks import hooks
from django.conf import settings
from django.contrib.contenttypes.models import ContentType
from django.core.cache import cache
from django.db import DEFAULT_DB_ALIAS, transaction

from .models import StockItem

logger = logging.getLogger("shopcart.inventory")

RESERVATIONS_HOOK = "stock.reservations.get"


def product_type_label(content_type: ContentType) -> str:
    return f"{content_type.app_label}.{content_type.model}"


def _cache_key(product_type: str, product_id, using: str = DEFAULT_DB_ALIAS) -> str:
    # Tenants are database aliases and may share one cache backend
    return f"inventory:available:{using}:{product_type.lower()}:{product_id}"


def _database_of(product) -> str:
    return product._state.db or DEFAULT_DB_ALIAS


class StockAvailabilityService:
    """Answers "how many units can still be put in carts" for a product.

    Available stock is on-hand quantity minus the quantity reserved by other
    parties (collected through the ``stock.reservations.get`` hook). Results
    are cached per database and product until invalidated or the cache
    timeout elapses.
    """

    def get_available_stock(self, product) -> int | None:
        using = _database_of(product)
        content_type = ContentType.objects.db_manager(using).get_for_model(product)
        product_type = product_type_label(content_type)
        key = _cache_key(product_type, product.pk, using)
        cached = cache.get(key)
        if cached is not None:
            return cached

        item = (
            StockItem.objects.using(using)
            .filter(product_content_type=content_type, product_object_id=product.pk)
            .only("quantity")
            .first()
        )
        if item is None:
            # Unknown stock: callers skip the availability check
            return None
        reserved = hooks.execute(
            RESERVATIONS_HOOK,
            0,
            {"productible_type": product_type, "productible_id": product.pk, "using": using},
        )
        available = max(0, int(item.quantity) - int(reserved or 0))
        cache.set(key, available, timeout=getattr(settings, "INVENTORY_AVAILABILITY_CACHE_SECONDS", 300))
        return available

    def has_enough_stock(self, product, quantity: int) -> bool:
        available = self.get_available_stock(product)
        return available is None or available >= quantity

    def invalidate_cache(self, product_type: str, product_id, using: str = DEFAULT_DB_ALIAS) -> None:
        cache.delete(_cache_key(product_type, product_id, using))
        logger.debug(
            "inventory.cache_invalidated",
            extra={
                "event": "inventory.cache_invalidated",
                "database": using,
                "product_type": product_type,
                "product_id": product_id,
            },
        )

    def set_stock(self, product, quantity: int) -> StockItem:
        """Set the on-hand quantity for a product, creating the stock row if missing."""

        using = _database_of(product)
        content_type = ContentType.objects.db_manager(using).get_for_model(product)
        with transaction.atomic(using=using):
            item, _ = StockItem.objects.using(using).select_for_update().get_or_create(
                product_content_type=content_type,
                product_object_id=product.pk,
                defaults={"quantity": quantity},
            )
            if item.quantity != quantity:
                item.quantity = quantity
                item.save(update_fields=["quantity", "updated_at"])
        self.invalidate_cache(product_type_label(content_type), product.pk, using)
        return item
