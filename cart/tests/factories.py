from datetime import timedelta

import factory
from cart.models import CartItem
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.utils import timezone
from factory.django import DjangoModelFactory
from inventory.models import StockItem


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Faker("email")
    password = factory.django.Password("pass")


class StockItemFactory(DjangoModelFactory):
    class Meta:
        model = StockItem
        exclude = ["product"]

    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    product_content_type = factory.LazyAttribute(lambda o: ContentType.objects.get_for_model(o.product))
    product_object_id = factory.LazyAttribute(lambda o: o.product.pk)
    quantity = 10


class CartItemFactory(DjangoModelFactory):
    """Guest cart row by default; pass `owner=user` for an owner's cart."""

    class Meta:
        model = CartItem
        exclude = ["product", "owner"]

    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    owner = None
    product_content_type = factory.LazyAttribute(lambda o: ContentType.objects.get_for_model(o.product))
    product_object_id = factory.LazyAttribute(lambda o: o.product.pk)
    owner_content_type = factory.LazyAttribute(
        lambda o: ContentType.objects.get_for_model(o.owner) if o.owner is not None else None
    )
    owner_object_id = factory.LazyAttribute(lambda o: o.owner.pk if o.owner is not None else None)
    guest_token = factory.LazyAttribute(lambda o: None if o.owner is not None else "guest-token")
    quantity = 1
    expires_at = factory.LazyFunction(lambda: timezone.now() + timedelta(minutes=60))

    class Params:
        expired = factory.Trait(expires_at=factory.LazyFunction(lambda: timezone.now() - timedelta(minutes=1)))
        no_expiry = factory.Trait(expires_at=None)
