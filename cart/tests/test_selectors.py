from datetime import timedelta

import pytest
from cart.identity import CartIdentity, resolve_identity
from cart.models import CartItem
from cart.selectors import cart_items_for_identity, expired_cart_items, find_cart_item, not_expired, reserved_quantity
from cart.tests.factories import CartItemFactory, UserFactory
from catalog.tests.factories import ProductFactory
from django.contrib.auth.models import AnonymousUser
from django.utils import timezone


@pytest.mark.django_db
def test_not_expired_excludes_past_expiry_only():
    live = CartItemFactory()
    never = CartItemFactory(no_expiry=True)
    CartItemFactory(expired=True)

    assert set(not_expired(CartItem.objects.all()).values_list("pk", flat=True)) == {live.pk, never.pk}


@pytest.mark.django_db
def test_row_expiring_exactly_now_is_neither_live_nor_swept():
    now = timezone.now()
    row = CartItemFactory(expires_at=now)

    assert not not_expired(CartItem.objects.all(), now=now).exists()
    assert not expired_cart_items(now=now).exists()
    assert expired_cart_items(now=now + timedelta(seconds=1)).get() == row


@pytest.mark.django_db
def test_reserved_quantity_sums_live_rows_across_carts():
    user = UserFactory()
    product = ProductFactory()
    CartItemFactory(product=product, guest_token="a", quantity=2)
    CartItemFactory(product=product, owner=user, quantity=3)
    CartItemFactory(product=product, guest_token="b", quantity=7, expired=True)
    CartItemFactory(guest_token="a", quantity=11)

    assert reserved_quantity(product_type="catalog.product", product_id=product.pk) == 5
    assert reserved_quantity(product_type="catalog.Product", product_id=product.pk) == 5
    assert reserved_quantity(product_type="nowhere.model", product_id=product.pk) == 0


@pytest.mark.django_db
def test_find_and_list_are_scoped_to_identity():
    user = UserFactory()
    product = ProductFactory()
    mine = CartItemFactory(product=product, guest_token="g1")
    CartItemFactory(product=product, guest_token="g2")
    CartItemFactory(product=product, owner=user)

    assert find_cart_item(identity=CartIdentity.for_guest("g1"), product=product) == mine
    assert find_cart_item(identity=CartIdentity.for_guest("nobody"), product=product) is None
    assert list(cart_items_for_identity(identity=CartIdentity.for_guest("g1"))) == [mine]
    assert cart_items_for_identity(identity=CartIdentity.for_owner(user)).count() == 1


@pytest.mark.django_db
def test_find_ignores_expiry():
    product = ProductFactory()
    stale = CartItemFactory(product=product, guest_token="g1", expired=True)

    assert find_cart_item(identity=CartIdentity.for_guest("g1"), product=product) == stale
    assert not cart_items_for_identity(identity=CartIdentity.for_guest("g1")).exists()
    assert cart_items_for_identity(identity=CartIdentity.for_guest("g1"), fresh_only=False).get() == stale


@pytest.mark.django_db
def test_resolve_identity_prefers_authenticated_user():
    user = UserFactory()

    owner = resolve_identity(user=user, guest_token="g1")
    assert owner.owner_id == user.pk
    assert owner.guest_token is None
    assert not owner.is_guest

    guest = resolve_identity(user=AnonymousUser(), guest_token="  g1 ")
    assert guest == CartIdentity.for_guest("g1")
    assert guest.is_guest

    assert resolve_identity(user=AnonymousUser(), guest_token="   ") is None
    assert resolve_identity() is None
