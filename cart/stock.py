"""Access to the configured stock-availability collaborator.

`SHOPCART_STOCK_SERVICE` is a dotted path to a class exposing
``get_available_stock(product)`` and
``invalidate_cache(product_type, product_id, using="default")``.
An empty setting means no inventory integration.
"""

import logging
from functools import partial

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils.module_loading import import_string

logger = logging.getLogger("shopcart.cart")


def get_stock_service():
    path = getattr(settings, "SHOPCART_STOCK_SERVICE", None)
    if not path:
        return None
    return import_string(path)()


def invalidate_stock_cache(product_type: str, product_id, *, using: str = DEFAULT_DB_ALIAS, service=None) -> bool:
    """Best-effort cache invalidation; returns whether a collaborator was notified."""

    try:
        if service is None:
            service = get_stock_service()
        if service is None:
            return False
        service.invalidate_cache(product_type, product_id, using=using)
    except Exception:
        logger.exception(
            "cart.stock_invalidation_failed",
            extra={
                "event": "cart.stock_invalidation_failed",
                "database": using,
                "product_type": product_type,
                "product_id": product_id,
            },
        )
        return False
    return True


def invalidate_stock_cache_on_commit(product_type: str, product_id, *, using: str = DEFAULT_DB_ALIAS) -> None:
    """Schedule invalidation for when the current transaction on `using` commits.

    Outside a transaction the invalidation runs immediately.
    """

    transaction.on_commit(partial(invalidate_stock_cache, product_type, product_id, using=using), using=using)
