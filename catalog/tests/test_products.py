from decimal import Decimal

import pytest
from cart.interfaces import Inventoriable, Purchasable
from catalog.models import Product
from catalog.tests.factories import ProductFactory
from django.db import IntegrityError


def test_final_price_applies_discount_and_rounds_half_up():
    product = Product(sale_price=Decimal("19.99"), discount_percent=Decimal("15.00"))
    # 19.99 * 0.85 = 16.9915
    assert product.get_final_price() == Decimal("16.99")

    product = Product(sale_price=Decimal("0.05"), discount_percent=Decimal("50.00"))
    # 0.025 rounds up
    assert product.get_final_price() == Decimal("0.03")


def test_final_price_without_discount_is_sale_price():
    product = Product(sale_price=Decimal("42.00"))
    assert product.get_final_price() == Decimal("42.00")


def test_regular_price_falls_back_to_sale_price():
    assert Product(sale_price=Decimal("9.00"), regular_price=None).get_regular_price() == Decimal("9.00")
    assert Product(sale_price=Decimal("9.00"), regular_price=Decimal("12.00")).get_regular_price() == Decimal("12.00")


def test_purchasable_and_stock_flags():
    assert Product(status=Product.STATUS_PUBLISHED).can_be_purchased()
    assert not Product(status=Product.STATUS_DRAFT).can_be_purchased()
    assert Product(track_inventory=True).handles_stock()
    assert not Product(track_inventory=False).handles_stock()


def test_product_satisfies_cart_interfaces():
    product = Product(sale_price=Decimal("1.00"))
    assert isinstance(product, Purchasable)
    assert isinstance(product, Inventoriable)


@pytest.mark.django_db
def test_negative_sale_price_rejected():
    with pytest.raises(IntegrityError):
        ProductFactory(sale_price=Decimal("-1.00"), regular_price=None)


@pytest.mark.django_db
def test_discount_percent_above_hundred_rejected():
    with pytest.raises(IntegrityError):
        ProductFactory(discount_percent=Decimal("120.00"))
