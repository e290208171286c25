"""Order endpoints: guest order lookup and staff status updates."""

from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import permissions, status
from rest_framework import serializers as rf_serializers
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import fetch_order, fetch_order_for_customer
from .serializers import OrderSerializer, OrderStatusUpdateSerializer
from .services import update_order_status

ERROR = inline_serializer(name="OrderError", fields={"detail": rf_serializers.CharField()})


def _lookup_failed(result):
    code = status.HTTP_404_NOT_FOUND if result.missing else status.HTTP_503_SERVICE_UNAVAILABLE
    return Response({"detail": result.error}, status=code)


class OrderDetailView(APIView):
    """Look up an order by its number and the email it was placed with.

    There are no customer accounts; the pair acts as the order's credentials.
    """

    throttle_scope = "orders"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Orders"],
        summary="Get order",
        description="Returns the order with its lines, status and tracking number. A wrong email answers 404.",
        parameters=[OpenApiParameter("email", str, required=True, description="Email used at checkout")],
        responses={200: OrderSerializer, 404: ERROR},
    )
    def get(self, request, number: str):
        result = fetch_order_for_customer(number=number, email=request.query_params.get("email", ""))
        if not result.ok:
            return _lookup_failed(result)
        return Response(OrderSerializer(result.value).data)


class OrderStatusView(APIView):
    permission_classes = [permissions.IsAdminUser]
    throttle_scope = "orders_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Orders"],
        summary="Update order status (staff)",
        description=(
            "Moves the order along pending, confirmed, paid, processing, shipped and delivered. "
            "Orders may be cancelled before shipping and refunded once paid; cancelled and refunded are final. "
            "The customer is emailed when the order ships."
        ),
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer, 400: ERROR, 404: ERROR},
        examples=[
            OpenApiExample(
                "Ship", value={"status": "shipped", "tracking_number": "1Z999AA10123456784"}, request_only=True
            )
        ],
    )
    def patch(self, request, number: str):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = fetch_order(number=number)
        if not result.ok:
            return _lookup_failed(result)
        try:
            order = update_order_status(result.value, **serializer.validated_data)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderSerializer(order).data)
