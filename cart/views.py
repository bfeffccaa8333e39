"""DRF views for cart operations.

Every endpoint serves both authenticated users and guests; guests identify
their cart with the ``X-Guest-Token`` header. Responses use a
``{"message", "data"}`` envelope.
"""

from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import IdentityRequired, InsufficientStock
from .identity import GUEST_TOKEN_HEADER, identity_from_request
from .serializers import (
    AddItemSerializer,
    CartItemReadSerializer,
    CartSerializer,
    DeleteItemSerializer,
    RemoveItemSerializer,
    SmallCartSerializer,
)
from .services import add_product, delete_product, remove_product
from .shop_cart import ShopCart

GUEST_TOKEN_PARAMETER = OpenApiParameter(
    name=GUEST_TOKEN_HEADER,
    location=OpenApiParameter.HEADER,
    required=False,
    description="Opaque guest cart token; used when the request is not authenticated",
    type=str,
)

ENVELOPE_ERROR = inline_serializer(
    name="CartEnvelopeError",
    fields={"message": rf_serializers.CharField(), "data": rf_serializers.JSONField(allow_null=True)},
)


def envelope(message: str, data=None, status_code: int = status.HTTP_200_OK) -> Response:
    return Response({"message": message, "data": data}, status=status_code)


class CartItemsView(APIView):
    """List the rows of the caller's cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="List cart items",
        description="Returns the non-expired items of the caller's cart.",
        parameters=[GUEST_TOKEN_PARAMETER],
        responses={
            200: inline_serializer(
                name="CartItemsResponse",
                fields={"message": rf_serializers.CharField(), "data": CartItemReadSerializer(many=True)},
            )
        },
    )
    def get(self, request):
        cart = ShopCart(identity=identity_from_request(request))
        return envelope("Cart items retrieved successfully", cart.items_data())


class CartView(APIView):
    """Return the caller's priced cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns items, subtotal, total, cart discounts and extra charges.",
        parameters=[GUEST_TOKEN_PARAMETER],
        responses={
            200: inline_serializer(
                name="CartResponse",
                fields={"message": rf_serializers.CharField(), "data": CartSerializer()},
            )
        },
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "message": "Shop cart retrieved successfully",
                    "data": {
                        "items": [],
                        "subtotal": "90.00",
                        "total": "87.00",
                        "discounts": [{"amount": "5.00"}],
                        "extra_charges": [{"amount": "2.00"}],
                    },
                },
            )
        ],
    )
    def get(self, request):
        cart = ShopCart(identity=identity_from_request(request))
        data = CartSerializer(cart.to_dict()).data
        return envelope("Shop cart retrieved successfully", data)


class SmallCartView(APIView):
    """Return the item count and total of the caller's cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart summary",
        parameters=[GUEST_TOKEN_PARAMETER],
        responses={
            200: inline_serializer(
                name="SmallCartResponse",
                fields={"message": rf_serializers.CharField(), "data": SmallCartSerializer()},
            )
        },
        examples=[
            OpenApiExample(
                "Summary",
                value={
                    "message": "Small shop cart retrieved successfully",
                    "data": {"total_items": 2, "total_price": "87.00"},
                },
            )
        ],
    )
    def get(self, request):
        cart = ShopCart(identity=identity_from_request(request))
        data = SmallCartSerializer(cart.summary()).data
        return envelope("Small shop cart retrieved successfully", data)


class AddToCartView(APIView):
    """Add a product to the caller's cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add product to cart",
        description="Adds a quantity of a product, incrementing an existing line and refreshing its expiry.",
        parameters=[GUEST_TOKEN_PARAMETER],
        request=AddItemSerializer,
        responses={
            200: inline_serializer(
                name="CartItemAddedResponse",
                fields={"message": rf_serializers.CharField(), "data": CartItemReadSerializer()},
            ),
            400: ENVELOPE_ERROR,
            404: ENVELOPE_ERROR,
        },
        examples=[
            OpenApiExample(
                "Insufficient stock",
                value={
                    "message": "Insufficient stock for product ID 7. Requested: 5, Available: 2",
                    "data": None,
                },
                response_only=True,
                status_codes=["400"],
            )
        ],
    )
    def post(self, request):
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            item = add_product(identity=identity_from_request(request), **serializer.validated_data)
        except (IdentityRequired, InsufficientStock) as exc:
            return envelope(str(exc), status_code=status.HTTP_400_BAD_REQUEST)
        if item is None:
            return envelope("Product not found or invalid configuration", status_code=status.HTTP_404_NOT_FOUND)
        return envelope("Product added to cart", CartItemReadSerializer(item).data)


class RemoveFromCartView(APIView):
    """Take a quantity of a product out of the caller's cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove product quantity from cart",
        description="Decrements a line; the line is removed when nothing is left. Missing lines are a no-op.",
        parameters=[GUEST_TOKEN_PARAMETER],
        request=RemoveItemSerializer,
        responses={
            200: inline_serializer(
                name="CartItemRemovedResponse",
                fields={
                    "message": rf_serializers.CharField(),
                    "data": CartItemReadSerializer(allow_null=True),
                },
            )
        },
    )
    def put(self, request):
        serializer = RemoveItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        item = remove_product(identity=identity_from_request(request), **serializer.validated_data)
        if item is None:
            return envelope("Product removed from cart")
        return envelope("Product quantity updated in cart", CartItemReadSerializer(item).data)


class DeleteFromCartView(APIView):
    """Drop a product from the caller's cart."""

    permission_classes = [AllowAny]
    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Delete product from cart",
        parameters=[GUEST_TOKEN_PARAMETER],
        request=DeleteItemSerializer,
        responses={200: ENVELOPE_ERROR, 404: ENVELOPE_ERROR},
    )
    def delete(self, request):
        serializer = DeleteItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if not delete_product(identity=identity_from_request(request), **serializer.validated_data):
            return envelope("Cart item not found", status_code=status.HTTP_404_NOT_FOUND)
        return envelope("Cart item deleted successfully")
