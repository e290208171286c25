"""Checkout API endpoints.

All endpoints are scoped to the cart of the `X-Session-Id` header. The
checkout key returned by `POST /checkout/` is the idempotency key for
every submission of that cart snapshot.
"""

from cart.views import SESSION_HEADER, missing_session_response, session_id_from
from common.choices import Currency
from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from orders.serializers import OrderSerializer
from payments.manager import get_payment_manager
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    CheckoutFormSerializer,
    CheckoutSessionSerializer,
    ConfirmPaymentSerializer,
    PaymentMethodsSerializer,
    StartCheckoutSerializer,
)
from .services import CheckoutError, confirm_checkout, get_checkout, session_totals, start_checkout, submit_checkout

ERROR = inline_serializer(name="CheckoutError", fields={"detail": rf_serializers.CharField()})

CONFIRMATION_EXAMPLE = OpenApiExample(
    "Paid",
    value={
        "key": "9b2f6a0e-2d7c-4c59-9f8e-0a4f2d2b7f11",
        "state": "succeeded",
        "confirmation": {
            "order_id": "MH-000123",
            "total": "648.00",
            "email": "ada@example.com",
            "payment_id": "pi_3P1",
            "payment_method": "card",
        },
        "payment": {"success": True, "payment_id": "pi_3P1", "payment_method": "card", "error": ""},
    },
)


def session_payload(session, manager=None):
    manager = manager or get_payment_manager()
    data = {
        "key": session.key,
        "state": session.state,
        "currency": session.currency,
        "country": session.country,
        "last_error": session.last_error,
        "expires_at": session.expires_at,
        "totals": session_totals(session),
        "available_payment_methods": manager.get_available_payment_methods(session.currency, session.country),
        "confirmation": session.confirmation,
        "order": session.order,
    }
    return CheckoutSessionSerializer(data).data


class CheckoutView(APIView):
    """Start checkout for the session's cart."""

    throttle_scope = "checkout_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="Start checkout",
        description=(
            "Issues the checkout key for the current cart contents. Calling it again with an unchanged "
            "cart returns the same key (200); a new cart snapshot gets a new key (201)."
        ),
        parameters=[SESSION_HEADER],
        request=StartCheckoutSerializer,
        responses={200: CheckoutSessionSerializer, 201: CheckoutSessionSerializer, 400: ERROR},
    )
    def post(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        serializer = StartCheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            session, created = start_checkout(session_id=session_id, **serializer.validated_data)
        except CheckoutError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return Response(session_payload(session), status=code)


class CheckoutDetailView(APIView):
    throttle_scope = "checkout"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="Get checkout",
        description="Returns state, totals, offered payment methods and, once paid, the confirmation and order.",
        parameters=[SESSION_HEADER],
        responses={200: CheckoutSessionSerializer, 404: ERROR},
    )
    def get(self, request, key):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        try:
            session = get_checkout(key=key, session_id=session_id)
        except CheckoutError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return Response(session_payload(session))


class CheckoutSubmitView(APIView):
    """Validate the checkout form and take the payment."""

    throttle_scope = "checkout_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="Submit checkout",
        description=(
            "Validates the form, prices the cart (free shipping from 500, 8% tax) and starts the payment.\n\n"
            "- 201: paid; the cart is cleared and the confirmation returned.\n"
            "- 202: the provider needs a hosted client step (regional overlay, or the card widget when no "
            "`card_payment_method` token is sent); `next_action.params` carries its options. Submitting "
            "again abandons that step and starts a new attempt.\n"
            "- 402: payment failed; the cart is kept and the checkout returns to editing.\n"
            "- 409: a payment for this key is in flight, or the cart changed since checkout started.\n"
            "- 410: the checkout key expired.\n"
            "- 200: already paid; the stored confirmation is replayed."
        ),
        parameters=[SESSION_HEADER],
        request=CheckoutFormSerializer,
        responses={
            200: inline_serializer(name="CheckoutReplay", fields={"confirmation": rf_serializers.JSONField()}),
            201: inline_serializer(name="CheckoutPaid", fields={"confirmation": rf_serializers.JSONField()}),
            202: inline_serializer(name="CheckoutNextAction", fields={"next_action": rf_serializers.JSONField()}),
            400: ERROR,
            402: inline_serializer(name="CheckoutPaymentFailed", fields={"error": rf_serializers.CharField()}),
            409: ERROR,
            410: ERROR,
        },
        examples=[CONFIRMATION_EXAMPLE],
    )
    def post(self, request, key):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        manager = get_payment_manager()
        try:
            # Replays, expired keys and in-flight submissions are answered before the form is validated
            session = get_checkout(key=key, session_id=session_id)
            if (
                session.state == session.STATE_SUCCEEDED
                or session.is_expired
                or (session.state == session.STATE_SUBMITTING and session.attempt_awaiting_client() is None)
            ):
                body, code = submit_checkout(key=key, session_id=session_id, data={}, manager=manager)
                return Response(body, status=code)
            serializer = CheckoutFormSerializer(data=request.data, context={"manager": manager, "session": session})
            serializer.is_valid(raise_exception=True)
            body, code = submit_checkout(
                key=key, session_id=session_id, data=serializer.validated_data, manager=manager
            )
        except CheckoutError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return Response(body, status=code)


class CheckoutConfirmView(APIView):
    """Complete a payment that needed a hosted client step."""

    throttle_scope = "checkout_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="Confirm payment",
        description=(
            "Send the overlay callback (`razorpay_payment_id`, `razorpay_order_id`, `razorpay_signature`), "
            "`{\"dismissed\": true}` when the customer closed it, or `payment_intent` for a card payment "
            "confirmed in the browser."
        ),
        parameters=[SESSION_HEADER],
        request=ConfirmPaymentSerializer,
        responses={200: ERROR, 201: ERROR, 402: ERROR, 409: ERROR},
        examples=[CONFIRMATION_EXAMPLE],
    )
    def post(self, request, key):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            body, code = confirm_checkout(key=key, session_id=session_id, payload=serializer.validated_data)
        except CheckoutError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return Response(body, status=code)


class PaymentMethodsView(APIView):
    """Payment methods offered for a currency and country."""

    throttle_scope = "checkout"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="List payment methods",
        description=(
            "Methods offered for the region, in display order. `selected` echoes the requested method "
            "when offered, else falls back to the first offered one."
        ),
        parameters=[
            OpenApiParameter("currency", str, description="USD, EUR, GBP or INR (default USD)"),
            OpenApiParameter("country", str, description="ISO alpha-2 country code (default US)"),
            OpenApiParameter("selected", str, description="Currently selected method"),
        ],
        responses={200: PaymentMethodsSerializer, 400: ERROR},
        examples=[
            OpenApiExample(
                "India",
                value={
                    "currency": "INR",
                    "country": "IN",
                    "methods": ["card", "upi", "wallet", "bank-transfer", "paypal"],
                    "selected": "upi",
                },
            )
        ],
    )
    def get(self, request):
        currency = (request.query_params.get("currency") or Currency.USD).upper()
        country = (request.query_params.get("country") or "US").upper()
        if currency not in Currency.values:
            return Response({"detail": "Unsupported currency."}, status=status.HTTP_400_BAD_REQUEST)
        manager = get_payment_manager()
        methods = manager.get_available_payment_methods(currency, country)
        selected = request.query_params.get("selected")
        resolved = (selected if selected in methods else methods[0]) if methods else None
        data = {"currency": currency, "country": country, "methods": methods, "selected": resolved}
        return Response(PaymentMethodsSerializer(data).data)
