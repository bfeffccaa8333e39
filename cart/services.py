"""Cart services: mutations of the cart-item ledger.

Cart rows double as soft stock reservations, so every mutation that changes a
product's held quantity tells the stock collaborator to drop its cached
availability for that product once the change commits.
"""

import logging
from datetime import timedelta

from django.apps import apps
from django.conf import settings
from django.contrib.contenttypes.models import ContentType
from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import IdentityRequired, InsufficientStock, ProductNotFound
from .identity import CartIdentity
from .interfaces import Inventoriable, Purchasable
from .models import CartItem
from .selectors import find_cart_item, product_lookup
from .stock import get_stock_service, invalidate_stock_cache_on_commit

logger = logging.getLogger("shopcart.cart")


def cart_item_expiry(now=None):
    """Expiry for a row touched at `now`; None when no TTL is configured."""

    ttl_minutes = getattr(settings, "SHOPCART_CART_ITEM_TTL", None)
    if ttl_minutes is None:
        return None
    return (now or timezone.now()) + timedelta(minutes=int(ttl_minutes))


def get_product_model():
    label = getattr(settings, "SHOPCART_PRODUCT_MODEL", "catalog.Product")
    try:
        return apps.get_model(label)
    except (LookupError, ValueError) as exc:
        raise ProductNotFound(f"Product model {label!r} is not installed") from exc


def resolve_product(product_id):
    """Load a product of the configured SHOPCART_PRODUCT_MODEL by id."""

    model = get_product_model()
    product = model._default_manager.filter(pk=product_id).first()
    if product is None:
        raise ProductNotFound(f"Product {product_id} not found")
    if not isinstance(product, Purchasable):
        raise ProductNotFound(f"{model._meta.label} does not implement the purchasable interface")
    return product


def product_type_of(product) -> str:
    content_type = ContentType.objects.get_for_model(product)
    return f"{content_type.app_label}.{content_type.model}"


def _ensure_stock(product, quantity: int) -> None:
    if not (isinstance(product, Inventoriable) and product.handles_stock()):
        return
    service = get_stock_service()
    if service is None:
        return
    available = service.get_available_stock(product)
    if available is not None and available < quantity:
        raise InsufficientStock(product.pk, quantity, available)


def _log(event: str, *, identity: CartIdentity, product, **fields) -> None:
    logger.info(
        event,
        extra={
            "event": event,
            "product_id": product.pk,
            **identity.log_context(),
            **fields,
        },
    )


def _bump(item: CartItem, quantity: int, expires_at) -> CartItem:
    item.quantity += quantity
    item.expires_at = expires_at
    item.save(update_fields=["quantity", "expires_at", "updated_at"])
    return item


@transaction.atomic
def add_item(*, identity: CartIdentity | None, product, quantity: int) -> CartItem:
    """Add `quantity` of `product` to the identity's cart.

    An existing row for the product is incremented; every add refreshes the
    row's expiry. The stock check nets out what other carts already hold.
    """

    if identity is None:
        raise IdentityRequired()
    if quantity <= 0:
        raise ValueError("Quantity must be positive")

    _ensure_stock(product, quantity)
    expires_at = cart_item_expiry()

    item = find_cart_item(identity=identity, product=product, for_update=True)
    if item is not None:
        _bump(item, quantity, expires_at)
        event = "cart.item_updated"
    else:
        try:
            with transaction.atomic():
                item = CartItem.objects.create(
                    **identity.create_kwargs(),
                    **product_lookup(product),
                    quantity=quantity,
                    expires_at=expires_at,
                )
            event = "cart.item_added"
        except IntegrityError:
            # Lost the insert race to a concurrent add for the same product
            item = find_cart_item(identity=identity, product=product, for_update=True)
            if item is None:
                raise
            _bump(item, quantity, expires_at)
            event = "cart.item_updated"

    _log(event, identity=identity, product=product, item_id=item.id, quantity=item.quantity)
    invalidate_stock_cache_on_commit(product_type_of(product), product.pk)
    return item


def add_product(*, identity: CartIdentity | None, product_id, quantity: int) -> CartItem | None:
    """Resolve `product_id` and add it; None when the product cannot be bought."""

    if identity is None:
        raise IdentityRequired()
    try:
        product = resolve_product(product_id)
    except ProductNotFound as exc:
        logger.info(
            "cart.product_not_found",
            extra={"event": "cart.product_not_found", "product_id": product_id, "reason": str(exc)},
        )
        return None
    if not product.can_be_purchased():
        return None
    return add_item(identity=identity, product=product, quantity=quantity)


@transaction.atomic
def remove_item(*, identity: CartIdentity | None, product, quantity: int) -> CartItem | None:
    """Take `quantity` off the product's row.

    Returns the updated row, or None when there was no row or it was removed
    because nothing is left.
    """

    if identity is None:
        return None
    item = find_cart_item(identity=identity, product=product, for_update=True)
    if item is None:
        return None

    remaining = item.quantity - quantity
    if remaining <= 0:
        item_id = item.id
        item.delete()
        _log("cart.item_removed", identity=identity, product=product, item_id=item_id)
        result = None
    else:
        item.quantity = remaining
        item.save(update_fields=["quantity", "updated_at"])
        _log("cart.item_decremented", identity=identity, product=product, item_id=item.id, quantity=remaining)
        result = item

    invalidate_stock_cache_on_commit(product_type_of(product), product.pk)
    return result


def remove_product(*, identity: CartIdentity | None, product_id, quantity: int) -> CartItem | None:
    try:
        product = resolve_product(product_id)
    except ProductNotFound:
        return None
    return remove_item(identity=identity, product=product, quantity=quantity)


@transaction.atomic
def delete_item(*, identity: CartIdentity | None, product) -> bool:
    """Drop the product's row regardless of quantity; False when absent."""

    if identity is None:
        return False
    item = find_cart_item(identity=identity, product=product, for_update=True)
    if item is None:
        return False
    item_id = item.id
    item.delete()
    _log("cart.item_deleted", identity=identity, product=product, item_id=item_id)
    invalidate_stock_cache_on_commit(product_type_of(product), product.pk)
    return True


def delete_product(*, identity: CartIdentity | None, product_id) -> bool:
    try:
        product = resolve_product(product_id)
    except ProductNotFound:
        return False
    return delete_item(identity=identity, product=product)


@transaction.atomic
def delete_items_for_owner(*, owner_type: str, owner_id) -> int:
    """Purge every cart row of an owner, e.g. before the account is anonymized."""

    app_label, model = owner_type.lower().split(".", 1)
    try:
        content_type = ContentType.objects.get_by_natural_key(app_label, model)
    except ContentType.DoesNotExist:
        return 0
    qs = CartItem.objects.filter(owner_content_type=content_type, owner_object_id=owner_id)
    products = set(qs.values_list("product_content_type_id", "product_object_id"))
    deleted, _ = qs.delete()
    if deleted:
        logger.info(
            "cart.owner_items_purged",
            extra={
                "event": "cart.owner_items_purged",
                "owner_type": owner_type,
                "owner_id": owner_id,
                "deleted": deleted,
            },
        )
        for content_type_id, product_id in products:
            product_ct = ContentType.objects.get_for_id(content_type_id)
            invalidate_stock_cache_on_commit(f"{product_ct.app_label}.{product_ct.model}", product_id)
    return deleted
