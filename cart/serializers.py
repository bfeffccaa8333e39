"""Cart serializers for read and write operations."""

from common.hooks import hooks
from rest_framework import serializers

from .models import CartItem

PRODUCT_EXTEND_HOOK = "product.cart.array.extend"


class ProductibleSerializer(serializers.Serializer):
    """Product block of a cart line; `sale_price` is the final (discounted) price."""

    id = serializers.IntegerField(source="pk")
    type = serializers.SerializerMethodField()
    title = serializers.SerializerMethodField()
    sale_price = serializers.SerializerMethodField()
    base_price = serializers.DecimalField(source="sale_price", max_digits=12, decimal_places=2)
    regular_price = serializers.SerializerMethodField()

    def get_type(self, obj) -> str:
        return f"{obj._meta.app_label}.{obj._meta.model_name}"

    def get_title(self, obj) -> str:
        return getattr(obj, "title", None) or str(obj)

    def get_sale_price(self, obj) -> str:
        return f"{obj.get_final_price():.2f}"

    def get_regular_price(self, obj) -> str | None:
        price = obj.get_regular_price()
        return None if price is None else f"{price:.2f}"


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line, extended by `product.cart.array.extend` listeners."""

    product_type = serializers.CharField(read_only=True)
    product_id = serializers.IntegerField(source="product_object_id", read_only=True)
    productible = ProductibleSerializer(read_only=True)
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = CartItem
        fields = [
            "id",
            "product_type",
            "product_id",
            "quantity",
            "expires_at",
            "created_at",
            "updated_at",
            "productible",
            "line_total",
        ]

    def get_line_total(self, obj) -> str:
        return f"{obj.productible.get_final_price() * obj.quantity:.2f}"

    def to_representation(self, instance):
        data = super().to_representation(instance)
        product = instance.productible
        extra = hooks.execute(
            PRODUCT_EXTEND_HOOK,
            {},
            {
                "product_id": product.pk,
                "product_class": product._meta.label,
                "quantity": instance.quantity,
                "base_price": product.sale_price,
                "regular_price": product.get_regular_price(),
            },
        )
        if extra:
            data.update(extra)
        return data


class CartSerializer(serializers.Serializer):
    """Cart representation; keys added by cart modifiers pass through unchanged."""

    items = serializers.ListField(child=serializers.DictField())
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    discounts = serializers.ListField(child=serializers.DictField())
    extra_charges = serializers.ListField(child=serializers.DictField())

    def to_representation(self, instance):
        data = super().to_representation(instance)
        for key, value in instance.items():
            data.setdefault(key, value)
        return data


class SmallCartSerializer(serializers.Serializer):
    total_items = serializers.IntegerField()
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding a product to the cart."""

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class RemoveItemSerializer(serializers.Serializer):
    """Write serializer for taking a quantity of a product out of the cart."""

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)


class DeleteItemSerializer(serializers.Serializer):
    """Write serializer for dropping a product from the cart entirely."""

    product_id = serializers.IntegerField()
