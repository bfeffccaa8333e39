"""Capabilities a product model must offer to live in a cart."""

from decimal import Decimal
from typing import Protocol, runtime_checkable


@runtime_checkable
class Purchasable(Protocol):
    pk: int
    sale_price: Decimal

    def get_final_price(self) -> Decimal: ...

    def get_regular_price(self) -> Decimal: ...

    def can_be_purchased(self) -> bool: ...


@runtime_checkable
class Inventoriable(Protocol):
    def handles_stock(self) -> bool: ...
