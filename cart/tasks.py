"""Scheduled cart maintenance tasks.

Tasks are plain classes run by management commands; the platform scheduler
(cron, Render jobs, ...) triggers the command. Tenant-aware tasks run once per
tenant database.
"""

import logging

from django.contrib.contenttypes.models import ContentType
from django.db import transaction
from django.utils import timezone

from .selectors import expired_cart_items
from .stock import get_stock_service, invalidate_stock_cache

logger = logging.getLogger("shopcart.cart")


class ClearExpiredCartItemsTask:
    """Delete expired cart rows and release their soft stock reservations."""

    identifier = "shopcart:clear-expired-cart-items"
    description = "Clear expired cart items"
    schedule = "*/15 * * * *"
    tenant_aware = True

    def handle(self, *, using: str = "default", now=None) -> int:
        now = now or timezone.now()
        with transaction.atomic(using=using):
            qs = expired_cart_items(now=now, using=using)
            # Capture affected products first; they are gone after the delete
            products = set(qs.order_by().values_list("product_content_type_id", "product_object_id").distinct())
            deleted, _ = qs.delete()

        if not deleted:
            return 0

        logger.info(
            "cart.expired_items_cleared",
            extra={
                "event": "cart.expired_items_cleared",
                "database": using,
                "deleted": deleted,
                "products": len(products),
            },
        )
        self._release_stock(products, using=using)
        return deleted

    def _release_stock(self, products, *, using: str) -> None:
        try:
            service = get_stock_service()
        except Exception:
            logger.exception(
                "cart.stock_service_unavailable",
                extra={"event": "cart.stock_service_unavailable", "database": using},
            )
            return
        if service is None:
            return

        for content_type_id, product_id in products:
            try:
                content_type = ContentType.objects.db_manager(using).get_for_id(content_type_id)
            except Exception:
                logger.exception(
                    "cart.stock_invalidation_failed",
                    extra={
                        "event": "cart.stock_invalidation_failed",
                        "database": using,
                        "content_type_id": content_type_id,
                        "product_id": product_id,
                    },
                )
                continue
            invalidate_stock_cache(
                f"{content_type.app_label}.{content_type.model}", product_id, using=using, service=service
            )
