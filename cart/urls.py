"""Cart URL routes, mounted under /api/."""

from django.urls import path

from .views import (
    AddToCartView,
    CartItemsView,
    CartView,
    DeleteFromCartView,
    RemoveFromCartView,
    SmallCartView,
)

app_name = "cart"

urlpatterns = [
    path("cart", CartView.as_view(), name="cart-detail"),
    path("cart/items", CartItemsView.as_view(), name="cart-items"),
    path("small-cart", SmallCartView.as_view(), name="small-cart"),
    path("cart/product/add", AddToCartView.as_view(), name="cart-add-product"),
    path("cart/product/remove", RemoveFromCartView.as_view(), name="cart-remove-product"),
    path("cart/product/delete", DeleteFromCartView.as_view(), name="cart-delete-product"),
]
