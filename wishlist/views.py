"""DRF views for the session wishlist, keyed by the `X-Session-Id` header."""

from cart.views import SESSION_HEADER, missing_session_response, session_id_from
from common.throttling import SettingsScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .selectors import get_wishlist_for_session
from .serializers import WishlistItemSerializer, WishlistReadSerializer
from .services import (
    WishlistError,
    add_to_wishlist,
    clear_wishlist,
    is_in_wishlist,
    remove_from_wishlist,
    toggle_wishlist,
)

ERROR = inline_serializer(name="WishlistError", fields={"detail": rf_serializers.CharField()})
MEMBERSHIP = inline_serializer(
    name="WishlistMembership",
    fields={"product_id": rf_serializers.IntegerField(), "in_wishlist": rf_serializers.BooleanField()},
)


def wishlist_response(session_id: str, code=status.HTTP_200_OK):
    wishlist = get_wishlist_for_session(session_id=session_id)
    return Response(WishlistReadSerializer.from_wishlist(wishlist=wishlist).data, status=code)


class WishlistView(APIView):
    throttle_scope = "wishlist"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Get wishlist",
        description="Saved product ids in the order they were saved, with the products still on sale.",
        parameters=[SESSION_HEADER],
        responses={200: WishlistReadSerializer, 400: ERROR},
    )
    def get(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        return wishlist_response(session_id)


class WishlistAddItemView(APIView):
    throttle_scope = "wishlist_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Save product",
        description="Saves a product. Saving an already saved product changes nothing and answers 200.",
        parameters=[SESSION_HEADER],
        request=WishlistItemSerializer,
        responses={200: WishlistReadSerializer, 201: WishlistReadSerializer, 400: ERROR, 404: ERROR},
        examples=[OpenApiExample("Save", value={"product_id": 100}, request_only=True)],
    )
    def post(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        serializer = WishlistItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            added = add_to_wishlist(session_id=session_id, **serializer.validated_data)
        except WishlistError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return wishlist_response(session_id, code=status.HTTP_201_CREATED if added else status.HTTP_200_OK)


class WishlistItemView(APIView):
    """Membership check and removal of one saved product."""

    throttle_classes = [SettingsScopedRateThrottle]

    def get_throttles(self):
        self.throttle_scope = "wishlist" if self.request.method == "GET" else "wishlist_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Is product saved",
        parameters=[SESSION_HEADER],
        responses={200: MEMBERSHIP, 400: ERROR},
    )
    def get(self, request, product_id: int):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        return Response(
            {"product_id": product_id, "in_wishlist": is_in_wishlist(session_id=session_id, product_id=product_id)}
        )

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Remove product",
        description="Removes a saved product; products that were not saved are ignored.",
        parameters=[SESSION_HEADER],
        responses={200: WishlistReadSerializer, 400: ERROR},
    )
    def delete(self, request, product_id: int):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        remove_from_wishlist(session_id=session_id, product_id=product_id)
        return wishlist_response(session_id)


class WishlistToggleView(APIView):
    throttle_scope = "wishlist_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Toggle product",
        description="Saves the product when absent, removes it otherwise.",
        parameters=[SESSION_HEADER],
        request=None,
        responses={200: MEMBERSHIP, 400: ERROR, 404: ERROR},
        examples=[OpenApiExample("Saved", value={"product_id": 100, "in_wishlist": True})],
    )
    def post(self, request, product_id: int):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        try:
            saved = toggle_wishlist(session_id=session_id, product_id=product_id)
        except WishlistError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return Response({"product_id": product_id, "in_wishlist": saved})


class WishlistClearView(APIView):
    throttle_scope = "wishlist_write"
    throttle_classes = [SettingsScopedRateThrottle]

    @extend_schema(
        tags=["Wishlist Endpoints"],
        summary="Clear wishlist",
        parameters=[SESSION_HEADER],
        request=None,
        responses={200: WishlistReadSerializer, 400: ERROR},
    )
    def post(self, request):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        clear_wishlist(session_id=session_id)
        return wishlist_response(session_id)
