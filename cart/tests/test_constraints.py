import pytest
from cart.models import CartItem
from cart.tests.factories import CartItemFactory, UserFactory
from catalog.tests.factories import ProductFactory
from django.contrib.contenttypes.models import ContentType
from django.db import IntegrityError


@pytest.mark.django_db
def test_unique_product_per_guest_cart():
    product = ProductFactory()
    CartItemFactory(product=product, guest_token="g1")

    with pytest.raises(IntegrityError):
        CartItemFactory(product=product, guest_token="g1")


@pytest.mark.django_db
def test_unique_product_per_owner_cart():
    user = UserFactory()
    product = ProductFactory()
    CartItemFactory(product=product, owner=user)

    with pytest.raises(IntegrityError):
        CartItemFactory(product=product, owner=user)


@pytest.mark.django_db
def test_same_product_allowed_in_different_carts():
    product = ProductFactory()
    CartItemFactory(product=product, guest_token="g1")
    CartItemFactory(product=product, guest_token="g2")
    CartItemFactory(product=product, owner=UserFactory())

    assert CartItem.objects.count() == 3


@pytest.mark.django_db
def test_quantity_positive_constraint():
    with pytest.raises(IntegrityError):
        CartItemFactory(quantity=0)


@pytest.mark.django_db
def test_owner_and_guest_are_mutually_exclusive():
    product = ProductFactory()
    product_type = ContentType.objects.get_for_model(product)

    with pytest.raises(IntegrityError):
        CartItem.objects.create(product_content_type=product_type, product_object_id=product.pk)


@pytest.mark.django_db
def test_owner_with_guest_token_rejected():
    product = ProductFactory()
    user = UserFactory()

    with pytest.raises(IntegrityError):
        CartItem.objects.create(
            owner_content_type=ContentType.objects.get_for_model(user),
            owner_object_id=user.pk,
            guest_token="g1",
            product_content_type=ContentType.objects.get_for_model(product),
            product_object_id=product.pk,
        )


def test_indexes_defined_for_owner_and_product_lookups():
    index_fields = [tuple(idx.fields) for idx in CartItem._meta.indexes]
    assert ("owner_content_type", "owner_object_id") in index_fields
    assert ("product_content_type", "product_object_id") in index_fields
