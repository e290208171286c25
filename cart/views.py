"""DRF views for the session cart.

Every endpoint is keyed by the `X-Session-Id` header the storefront keeps
for the client profile.
"""

from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_active_cart_for_session
from .serializers import AddItemSerializer, CartCurrencySerializer, CartReadSerializer, UpdateQuantitySerializer
from .services import CartError, add_item, clear_cart, remove_item, set_currency, toggle_cart, update_quantity

SESSION_HEADER = OpenApiParameter(
    name="X-Session-Id",
    location=OpenApiParameter.HEADER,
    required=True,
    description="Opaque client profile id that owns the cart",
    type=str,
)

CART_EXAMPLE = OpenApiExample(
    "Cart",
    value={
        "id": 1,
        "session_id": "4f7d2c9e",
        "currency": "USD",
        "is_open": True,
        "items": [
            {
                "product_id": 100,
                "size": "50ml",
                "quantity": 2,
                "product_name": "Rose Absolue",
                "sku": "MH-PF-001",
                "unit_price": "320.00",
                "original_price": "380.00",
                "image_url": "https://images.example.com/rose.jpg",
                "line_total": "640.00",
                "added_at": "2024-05-01T10:00:00Z",
            }
        ],
        "total_items": 2,
        "total_price": "640.00",
        "savings": "120.00",
    },
)

MUTATION_ERROR = inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()})


def session_id_from(request):
    return (request.headers.get("X-Session-Id") or "").strip()[:64]


def missing_session_response():
    return Response({"detail": "X-Session-Id header is required."}, status=status.HTTP_400_BAD_REQUEST)


def cart_response(session_id: str, code=status.HTTP_200_OK):
    cart = get_active_cart_for_session(session_id=session_id)
    return Response(CartReadSerializer.from_cart(cart=cart).data, status=code)


class CartView(APIView):
    """Return the session's cart with derived totals."""

    throttle_classes = [SettingsScopedRateThrottle]

    def get_throttles(self):
        self.throttle_scope = "cart" if self.request.method == "GET" else "cart_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns the cart lines with total items, total price and savings.",
        parameters=[SESSION_HEADER],
        responses={200: CartReadSerializer, 400: MUTATION_ERROR},
        examples=[CART_EXAMPLE],
    )
    def get(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        return cart_response(session_id)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Set cart currency",
        description="Changes the currency the cart is shown and charged in.",
        parameters=[SESSION_HEADER],
        request=CartCurrencySerializer,
        responses={200: CartReadSerializer, 400: MUTATION_ERROR},
    )
    def patch(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        serializer = CartCurrencySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        set_currency(session_id=session_id, currency=serializer.validated_data["currency"])
        return cart_response(session_id)


class CartAddItemView(APIView):
    """Add a product to the cart."""

    throttle_scope = "cart_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Add item to cart",
        description=(
            "Adds a product (optionally a size) to the cart. Adding an existing product and size "
            "increases its quantity. Opens the cart drawer."
        ),
        parameters=[SESSION_HEADER],
        request=AddItemSerializer,
        responses={201: CartReadSerializer, 400: MUTATION_ERROR, 404: MUTATION_ERROR},
        examples=[OpenApiExample("Add", value={"product_id": 100, "quantity": 1, "size": "50ml"}, request_only=True)],
    )
    def post(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            add_item(session_id=session_id, **serializer.validated_data)
        except CartError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return cart_response(session_id, code=status.HTTP_201_CREATED)


class CartItemView(APIView):
    """Update or remove a cart line identified by product and size."""

    throttle_scope = "cart_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Update item quantity",
        description="Sets the line quantity exactly. A quantity of zero or less removes the line.",
        parameters=[SESSION_HEADER],
        request=UpdateQuantitySerializer,
        responses={200: CartReadSerializer, 400: MUTATION_ERROR},
    )
    def patch(self, request, product_id: int):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        serializer = UpdateQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        update_quantity(session_id=session_id, product_id=product_id, **serializer.validated_data)
        return cart_response(session_id)

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Remove item",
        description="Removes the line for the product and optional size; absent lines are ignored.",
        parameters=[
            SESSION_HEADER,
            OpenApiParameter("size", str, description="Size of the line; omit for products without sizes"),
        ],
        responses={200: CartReadSerializer, 400: MUTATION_ERROR},
    )
    def delete(self, request, product_id: int):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        remove_item(session_id=session_id, product_id=product_id, size=request.query_params.get("size", ""))
        return cart_response(session_id)


class CartClearView(APIView):
    """Empty the cart."""

    throttle_scope = "cart_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        description="Removes every line and closes the cart drawer.",
        parameters=[SESSION_HEADER],
        request=None,
        responses={200: CartReadSerializer, 400: MUTATION_ERROR},
    )
    def post(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        clear_cart(session_id=session_id)
        return cart_response(session_id)


class CartToggleView(APIView):
    """Flip the cart drawer flag."""

    throttle_scope = "cart_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Toggle cart drawer",
        parameters=[SESSION_HEADER],
        request=None,
        responses={200: inline_serializer(name="CartDrawerState", fields={"is_open": rf_serializers.BooleanField()})},
        examples=[OpenApiExample("Open", value={"is_open": True})],
    )
    def post(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        return Response({"is_open": toggle_cart(session_id=session_id)})
