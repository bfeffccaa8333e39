import pytest
from cart.models import CartItem
from cart.tests.factories import CartItemFactory, UserFactory


@pytest.mark.django_db
@pytest.mark.parametrize("query", ["", "?owner_type=user", "?owner_type=guest", "?expiry=expired", "?expiry=never"])
def test_cart_item_changelist_filters(admin_client, query):
    CartItemFactory(owner=UserFactory())
    CartItemFactory(expired=True)
    CartItemFactory(no_expiry=True)

    r = admin_client.get(f"/admin/cart/cartitem/{query}")

    assert r.status_code == 200


@pytest.mark.django_db
def test_delete_expired_action_sweeps_all_expired_rows(admin_client):
    live = CartItemFactory()
    expired = CartItemFactory(expired=True)
    CartItemFactory(expired=True, guest_token="other")

    r = admin_client.post(
        "/admin/cart/cartitem/",
        {"action": "action_delete_expired", "_selected_action": [live.pk, expired.pk]},
    )

    assert r.status_code == 302
    assert list(CartItem.objects.values_list("pk", flat=True)) == [live.pk]
