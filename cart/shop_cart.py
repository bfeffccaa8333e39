"""Shop cart aggregate: the priced, read-side view of an identity's cart rows.

Discounts and extra charges are collected from the ``cart.discounts.get`` and
``cart.charges.extra.get`` hooks. Listeners receive the cart in their context
and may read it back (e.g. to price a discount off the subtotal); a nested
lookup of the same hook on the same cart yields an empty list instead of
recursing.
"""

import logging
from decimal import Decimal

from common.hooks import HookManager, hooks
from django.db import transaction

from .exceptions import DataIntegrityViolation
from .identity import CartIdentity
from .interfaces import Purchasable
from .modifiers import CartModifierRegistry, cart_modifiers
from .models import CartItem
from .selectors import cart_items_for_identity
from .serializers import CartItemReadSerializer
from .stock import invalidate_stock_cache_on_commit

logger = logging.getLogger("shopcart.cart")

DISCOUNTS_HOOK = "cart.discounts.get"
EXTRA_CHARGES_HOOK = "cart.charges.extra.get"

ZERO = Decimal("0.00")


def _amount(entry: dict, *keys: str) -> Decimal:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return Decimal(str(value))
    return ZERO


class ShopCart:
    """Cart rows of one identity plus the derived totals.

    `base_subtotal` prices lines at the product's sale price.
    `subtotal_without_cart_discounts` prices them at the final price and runs
    the modifier chain. Cart-level discounts come off that, extra charges go
    on top.
    """

    def __init__(
        self,
        *,
        identity: CartIdentity | None,
        modifiers: CartModifierRegistry | None = None,
        hook_manager: HookManager | None = None,
    ):
        self.identity = identity
        self.modifiers = modifiers if modifiers is not None else cart_modifiers
        self.hooks = hook_manager if hook_manager is not None else hooks
        self._discounts: list | None = None
        self._extra_charges: list | None = None
        self._calculating_discounts = False
        self._calculating_extra_charges = False
        self._items: list[CartItem] = self._load_items()

    def _load_items(self) -> list[CartItem]:
        if self.identity is None:
            return []
        items = list(cart_items_for_identity(identity=self.identity))
        for item in items:
            if not isinstance(item.productible, Purchasable):
                raise DataIntegrityViolation(
                    f"Cart item {item.id} references {item.product_type}:{item.product_object_id}, "
                    "which does not implement the purchasable interface"
                )
        return items

    def get_items(self) -> list[CartItem]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # Hooks

    def discounts(self) -> list:
        if self._discounts is not None:
            return self._discounts
        if self._calculating_discounts:
            return []
        self._calculating_discounts = True
        try:
            self._discounts = list(self.hooks.execute(DISCOUNTS_HOOK, [], {"cart": self}) or [])
        finally:
            self._calculating_discounts = False
        return self._discounts

    def extra_charges(self) -> list:
        if self._extra_charges is not None:
            return self._extra_charges
        if self._calculating_extra_charges:
            return []
        self._calculating_extra_charges = True
        try:
            self._extra_charges = list(self.hooks.execute(EXTRA_CHARGES_HOOK, [], {"cart": self}) or [])
        finally:
            self._calculating_extra_charges = False
        return self._extra_charges

    # Totals

    def _sum_lines(self, *, final_price: bool) -> Decimal:
        subtotal = ZERO
        for item in self._items:
            product = item.productible
            price = product.get_final_price() if final_price else product.sale_price
            subtotal += Decimal(price) * item.quantity
        return subtotal

    def base_subtotal(self) -> Decimal:
        """Lines at sale price; product-level discounts and modifiers are ignored."""
        return self._sum_lines(final_price=False)

    def subtotal_without_cart_discounts(self) -> Decimal:
        """Lines at final price, refined by the registered cart modifiers."""
        return self.modifiers.reduce_subtotal(self, self._sum_lines(final_price=True))

    def discounts_total(self) -> Decimal:
        return sum((_amount(entry, "amount", "amount_saved") for entry in self.discounts()), ZERO)

    def extra_charges_total(self) -> Decimal:
        return sum((_amount(entry, "amount") for entry in self.extra_charges()), ZERO)

    def final_subtotal(self) -> Decimal:
        return self.subtotal_without_cart_discounts() - self.discounts_total()

    def total(self) -> Decimal:
        return self.final_subtotal() + self.extra_charges_total()

    # Representations

    def items_data(self) -> list[dict]:
        return list(CartItemReadSerializer(self._items, many=True).data)

    def to_dict(self) -> dict:
        base = {
            "items": self.items_data(),
            "subtotal": self.final_subtotal(),
            "total": self.total(),
            "discounts": self.discounts(),
            "extra_charges": self.extra_charges(),
        }
        return self.modifiers.extend_representation(self, base)

    def summary(self) -> dict:
        return {"total_items": len(self._items), "total_price": self.total()}

    def discounts_for_order(self) -> dict:
        """Product-level and cart-level discounts, for recording on an order."""

        product_discounts = []
        for item in self._items:
            product = item.productible
            saved = Decimal(product.sale_price) - product.get_final_price()
            if saved <= 0:
                continue
            product_discounts.append(
                {
                    "productible_type": item.product_type,
                    "productible_id": item.product_object_id,
                    "quantity": item.quantity,
                    "amount_saved": saved * item.quantity,
                }
            )
        return {"product_discounts": product_discounts, "cart_discounts": self.discounts()}

    # Mutation

    @transaction.atomic
    def clear(self) -> bool:
        """Delete every row of this cart; True when anything was deleted."""

        if self.identity is None:
            self._items = []
            return False
        qs = CartItem.objects.filter(**self.identity.lookup())
        products = {(item.product_type, item.product_object_id) for item in qs}
        deleted, _ = qs.delete()
        self._items = []
        self._discounts = None
        self._extra_charges = None
        if deleted:
            logger.info(
                "cart.cleared",
                extra={"event": "cart.cleared", "deleted": deleted, **self.identity.log_context()},
            )
            for product_type, product_id in products:
                invalidate_stock_cache_on_commit(product_type, product_id)
        return deleted > 0
