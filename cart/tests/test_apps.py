import pytest
from cart.apps import ANONYMIZE_HOOK, RESERVATIONS_HOOK, add_cart_reservations, purge_owner_cart
from cart.models import CartItem
from cart.tests.factories import CartItemFactory, UserFactory
from catalog.tests.factories import ProductFactory
from common.hooks import hooks


def test_listeners_registered_at_startup():
    assert add_cart_reservations in hooks.listeners(RESERVATIONS_HOOK)
    assert purge_owner_cart in hooks.listeners(ANONYMIZE_HOOK)


@pytest.mark.django_db
def test_reservations_hook_adds_live_cart_quantity():
    product = ProductFactory()
    CartItemFactory(product=product, guest_token="a", quantity=2)
    CartItemFactory(product=product, guest_token="b", quantity=9, expired=True)
    # Another reservation source contributes first
    hooks.register(RESERVATIONS_HOOK, lambda value, ctx: value + 4, priority=1)

    reserved = hooks.execute(
        RESERVATIONS_HOOK,
        0,
        {"productible_type": "catalog.product", "productible_id": product.pk},
    )

    assert reserved == 6


@pytest.mark.django_db
def test_anonymize_hook_purges_owner_cart_and_returns_data():
    user = UserFactory()
    CartItemFactory(owner=user)
    guest_row = CartItemFactory(guest_token="g1")
    payload = {"email": "anon@example.com"}

    result = hooks.execute(ANONYMIZE_HOOK, payload, {"user_id": user.pk, "user_class": "auth.user"})

    assert result == payload
    assert list(CartItem.objects.values_list("pk", flat=True)) == [guest_row.pk]


@pytest.mark.django_db
def test_anonymize_hook_without_user_context_is_harmless():
    CartItemFactory(owner=UserFactory())
    assert hooks.execute(ANONYMIZE_HOOK, "data", {}) == "data"
    assert CartItem.objects.count() == 1


@pytest.mark.django_db
def test_anonymize_hook_accepts_model_class():
    user = UserFactory()
    CartItemFactory(owner=user)

    hooks.execute(ANONYMIZE_HOOK, None, {"user_id": user.pk, "user_class": type(user)})

    assert not CartItem.objects.exists()
