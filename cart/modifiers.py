"""Cart modifiers: pluggable pricing and representation steps.

A modifier refines the running subtotal and may add its own keys to the cart
representation. Modifiers run in ascending priority; modifiers sharing a
priority keep the order they were registered in.
"""

import logging
from decimal import Decimal

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger("shopcart.cart")

DEFAULT_PRIORITY = 50


class BaseCartModifier:
    """Pass-through modifier; subclass and override what you need."""

    priority = DEFAULT_PRIORITY
    name: str | None = None

    def get_priority(self) -> int:
        return self.priority

    def get_name(self) -> str:
        return self.name or type(self).__name__

    def calculate_subtotal(self, cart, current_subtotal: Decimal) -> Decimal:
        return current_subtotal

    def extend_cart_dict(self, cart, data: dict) -> dict:
        return data


class CartModifierRegistry:
    def __init__(self):
        self._modifiers: list[BaseCartModifier] = []

    def register(self, modifier: BaseCartModifier) -> None:
        self._modifiers.append(modifier)
        # list.sort is stable: equal priorities keep registration order
        self._modifiers.sort(key=lambda m: m.get_priority())
        logger.debug(
            "cart.modifier_registered",
            extra={
                "event": "cart.modifier_registered",
                "modifier": modifier.get_name(),
                "priority": modifier.get_priority(),
            },
        )

    def unregister(self, name: str) -> None:
        self._modifiers = [m for m in self._modifiers if m.get_name() != name]

    def clear(self) -> None:
        self._modifiers = []

    @property
    def modifiers(self) -> list[BaseCartModifier]:
        return list(self._modifiers)

    def list(self) -> list[BaseCartModifier]:
        return self.modifiers

    def reduce_subtotal(self, cart, initial_subtotal: Decimal) -> Decimal:
        subtotal = initial_subtotal
        for modifier in self._modifiers:
            subtotal = modifier.calculate_subtotal(cart, subtotal)
        return subtotal

    def extend_representation(self, cart, base: dict) -> dict:
        result = base
        for modifier in self._modifiers:
            result = modifier.extend_cart_dict(cart, result)
        return result

    def __len__(self) -> int:
        return len(self._modifiers)


cart_modifiers = CartModifierRegistry()


def register_configured_modifiers(registry: CartModifierRegistry | None = None) -> None:
    """Instantiate and register the modifiers named in SHOPCART_CART_MODIFIERS."""

    registry = registry if registry is not None else cart_modifiers
    registered = {m.get_name() for m in registry.modifiers}
    for path in getattr(settings, "SHOPCART_CART_MODIFIERS", []):
        modifier = import_string(path)()
        if modifier.get_name() in registered:
            continue
        registry.register(modifier)
        registered.add(modifier.get_name())
