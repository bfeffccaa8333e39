from datetime import timedelta

import pytest
from cart.models import CartItem
from cart.tasks import ClearExpiredCartItemsTask
from cart.tests.factories import CartItemFactory
from catalog.tests.factories import ProductFactory
from django.contrib.contenttypes.models import ContentTypeManager
from django.db import DatabaseError
from django.utils import timezone


@pytest.fixture
def recorder(stock_recorder):
    return stock_recorder


def test_task_metadata():
    task = ClearExpiredCartItemsTask()
    assert task.identifier == "shopcart:clear-expired-cart-items"
    assert task.schedule == "*/15 * * * *"
    assert task.tenant_aware is True


@pytest.mark.django_db
def test_sweep_deletes_only_expired_rows(recorder):
    live = CartItemFactory()
    never = CartItemFactory(no_expiry=True)
    CartItemFactory(expired=True)
    CartItemFactory(expired=True, guest_token="other")

    assert ClearExpiredCartItemsTask().handle() == 2
    assert set(CartItem.objects.values_list("pk", flat=True)) == {live.pk, never.pk}


@pytest.mark.django_db
def test_sweep_invalidates_once_per_distinct_product(recorder):
    lamp = ProductFactory()
    desk = ProductFactory()
    for token in ("a", "b", "c"):
        CartItemFactory(product=lamp, guest_token=token, expired=True)
    CartItemFactory(product=desk, guest_token="a", expired=True)
    CartItemFactory(product=desk, guest_token="live")

    assert ClearExpiredCartItemsTask().handle() == 4
    assert sorted(recorder.calls) == sorted([("catalog.product", lamp.pk), ("catalog.product", desk.pk)])


@pytest.mark.django_db
def test_sweep_with_nothing_expired_notifies_nobody(recorder):
    CartItemFactory()
    assert ClearExpiredCartItemsTask().handle() == 0
    assert recorder.calls == []


@pytest.mark.django_db
def test_failed_invalidation_does_not_stop_the_others(recorder):
    products = [ProductFactory() for _ in range(3)]
    for product in products:
        CartItemFactory(product=product, expired=True)
    recorder.fail_for = {products[0].pk}

    assert ClearExpiredCartItemsTask().handle() == 3
    assert {product_id for _, product_id in recorder.calls} == {p.pk for p in products}
    assert not CartItem.objects.exists()


@pytest.mark.django_db
def test_sweep_uses_given_cutoff(recorder):
    row = CartItemFactory(expires_at=timezone.now() + timedelta(minutes=30))

    assert ClearExpiredCartItemsTask().handle(now=timezone.now() + timedelta(hours=1)) == 1
    assert not CartItem.objects.filter(pk=row.pk).exists()


@pytest.mark.django_db
def test_failed_product_type_lookup_does_not_stop_the_others(recorder, monkeypatch):
    products = [ProductFactory() for _ in range(2)]
    for product in products:
        CartItemFactory(product=product, expired=True)

    real_get_for_id = ContentTypeManager.get_for_id
    lookups = []

    def first_lookup_fails(self, id):
        lookups.append(id)
        if len(lookups) == 1:
            raise DatabaseError("content type lookup failed")
        return real_get_for_id(self, id)

    monkeypatch.setattr(ContentTypeManager, "get_for_id", first_lookup_fails)

    assert ClearExpiredCartItemsTask().handle() == 2
    assert len(lookups) == 2
    assert len(recorder.calls) == 1
    assert not CartItem.objects.exists()


@pytest.mark.django_db
def test_sweep_survives_misconfigured_stock_service(settings):
    settings.SHOPCART_STOCK_SERVICE = "nowhere.MissingService"
    CartItemFactory(expired=True)

    assert ClearExpiredCartItemsTask().handle() == 1
    assert not CartItem.objects.exists()


@pytest.mark.django_db
def test_sweep_invalidates_against_the_swept_database(recorder):
    CartItemFactory(expired=True)

    ClearExpiredCartItemsTask().handle(using="default")

    assert recorder.databases == ["default"]
