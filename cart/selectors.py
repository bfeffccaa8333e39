"""Selectors for read-only cart queries."""

from django.contrib.contenttypes.models import ContentType
from django.db.models import Q, QuerySet, Sum
from django.utils import timezone

from .identity import CartIdentity
from .models import CartItem


def not_expired(queryset: QuerySet, *, now=None) -> QuerySet:
    """Rows without an expiry, or expiring strictly after `now`."""

    now = now or timezone.now()
    return queryset.filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))


def product_lookup(product) -> dict:
    content_type = ContentType.objects.get_for_model(product)
    return {"product_content_type": content_type, "product_object_id": product.pk}


def find_cart_item(*, identity: CartIdentity, product, for_update: bool = False) -> CartItem | None:
    qs = CartItem.objects.filter(**identity.lookup(), **product_lookup(product))
    if for_update:
        qs = qs.select_for_update()
    return qs.first()


def cart_items_for_identity(*, identity: CartIdentity, fresh_only: bool = True) -> QuerySet:
    """Cart rows of an identity with their products prefetched."""

    qs = CartItem.objects.filter(**identity.lookup())
    if fresh_only:
        qs = not_expired(qs)
    return qs.prefetch_related("productible").order_by("id")


def reserved_quantity(*, product_type: str, product_id, now=None, using: str = "default") -> int:
    """Quantity held by non-expired cart rows for a product, across all carts."""

    app_label, model = product_type.lower().split(".", 1)
    try:
        content_type = ContentType.objects.db_manager(using).get_by_natural_key(app_label, model)
    except ContentType.DoesNotExist:
        return 0
    qs = CartItem.objects.using(using).filter(product_content_type=content_type, product_object_id=product_id)
    total = not_expired(qs, now=now).aggregate(total=Sum("quantity"))["total"]
    return int(total or 0)


def expired_cart_items(*, now=None, using: str = "default") -> QuerySet:
    now = now or timezone.now()
    return CartItem.objects.using(using).filter(expires_at__isnull=False, expires_at__lt=now)
