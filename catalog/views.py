"""Catalog endpoints: read-only products and customer reviews."""

from cart.views import SESSION_HEADER, missing_session_response, session_id_from
from common.choices import ProductCategory
from common.throttling import SettingsScopedRateThrottle
from django_filters import rest_framework as filters
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.exceptions import ValidationError
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle

from . import selectors
from .serializers import (
    ProductDetailSerializer,
    ProductListSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    ReviewSummarySerializer,
    ReviewUpdateSerializer,
)
from .services import ReviewError, create_review, mark_review_helpful, update_review

ORDERING_CHOICES = [
    (value, value)
    for field in ("name", "price", "rating", "created_at")
    for value in (field, f"-{field}")
]


class ProductQueryFilterSet(filters.FilterSet):
    """Validates list query params before they reach the selector."""

    category = filters.ChoiceFilter(choices=ProductCategory.choices)
    brand = filters.CharFilter()
    search = filters.CharFilter()
    in_stock = filters.BooleanFilter()
    price_min = filters.NumberFilter()
    price_max = filters.NumberFilter()
    ordering = filters.ChoiceFilter(choices=ORDERING_CHOICES)


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class ProductListView(generics.GenericAPIView):
    serializer_class = ProductListSerializer
    pagination_class = DefaultPagination
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, AnonRateThrottle]

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List products",
        description="Returns active products with optional filters, search and ordering.",
        parameters=[
            OpenApiParameter("category", OpenApiTypes.STR, description="perfume, watch or limited-edition"),
            OpenApiParameter("brand", OpenApiTypes.STR, description="Brand name (case-insensitive)"),
            OpenApiParameter("search", OpenApiTypes.STR, description="Match name, brand or description"),
            OpenApiParameter("in_stock", OpenApiTypes.BOOL, description="Only products with stock"),
            OpenApiParameter("price_min", OpenApiTypes.NUMBER),
            OpenApiParameter("price_max", OpenApiTypes.NUMBER),
            OpenApiParameter("ordering", OpenApiTypes.STR, description="name, price, rating, created_at (prefix -)"),
        ],
    )
    def get(self, request):
        filterset = ProductQueryFilterSet(request.query_params, queryset=selectors.active_products())
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)
        params = filterset.form.cleaned_data
        ordering = params.get("ordering")
        result = selectors.fetch_products(
            category=params.get("category") or None,
            brand=params.get("brand") or None,
            search=params.get("search") or None,
            in_stock=params.get("in_stock"),
            price_min=params.get("price_min"),
            price_max=params.get("price_max"),
            ordering=[ordering, "id"] if ordering else None,
        )
        if not result.ok:
            return Response({"detail": result.error}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        page = self.paginate_queryset(result.value)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)


class ProductDetailView(generics.GenericAPIView):
    serializer_class = ProductDetailSerializer
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, AnonRateThrottle]

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Get product by slug",
        description="Returns an active product with its full image list.",
    )
    def get(self, request, slug: str):
        result = selectors.fetch_product(slug=slug)
        if not result.ok:
            code = status.HTTP_404_NOT_FOUND if result.missing else status.HTTP_503_SERVICE_UNAVAILABLE
            return Response({"detail": result.error}, status=code)
        return Response(self.get_serializer(result.value).data)


ERROR = inline_serializer(name="CatalogError", fields={"detail": rf_serializers.CharField()})


def product_or_error(slug: str):
    """Return (product, None) or (None, error response)."""

    result = selectors.fetch_product(slug=slug)
    if result.ok:
        return result.value, None
    code = status.HTTP_404_NOT_FOUND if result.missing else status.HTTP_503_SERVICE_UNAVAILABLE
    return None, Response({"detail": result.error}, status=code)


class ProductReviewListView(generics.GenericAPIView):
    serializer_class = ReviewSerializer
    pagination_class = DefaultPagination
    throttle_classes = [SettingsScopedRateThrottle, AnonRateThrottle]

    def get_throttles(self):
        self.throttle_scope = "catalog" if self.request.method == "GET" else "reviews_write"
        return super().get_throttles()

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="List product reviews",
        description="Reviews of an active product, newest first.",
        responses={200: ReviewSerializer(many=True), 404: ERROR},
    )
    def get(self, request, slug: str):
        product, error = product_or_error(slug)
        if error is not None:
            return error
        result = selectors.fetch_reviews(product=product)
        if not result.ok:
            return Response({"detail": result.error}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        page = self.paginate_queryset(result.value)
        return self.get_paginated_response(self.get_serializer(page, many=True).data)

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Write a review",
        description=(
            "Publishes a 1 to 5 star review. Each `X-Session-Id` may review a product once (409 otherwise). "
            "The review is marked as a verified purchase when `email` has an order containing the product."
        ),
        parameters=[SESSION_HEADER],
        request=ReviewCreateSerializer,
        responses={201: ReviewSerializer, 400: ERROR, 404: ERROR, 409: ERROR},
        examples=[
            OpenApiExample(
                "Review",
                value={"author_name": "Ada", "email": "ada@example.com", "rating": 5, "title": "Sublime"},
                request_only=True,
            )
        ],
    )
    def post(self, request, slug: str):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        product, error = product_or_error(slug)
        if error is not None:
            return error
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            review = create_review(product=product, session_id=session_id, **serializer.validated_data)
        except ReviewError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class ProductReviewDetailView(generics.GenericAPIView):
    serializer_class = ReviewSerializer
    throttle_scope = "reviews_write"
    throttle_classes = [SettingsScopedRateThrottle, AnonRateThrottle]

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Edit a review",
        description="Only the `X-Session-Id` that wrote the review may edit it (403 otherwise).",
        parameters=[SESSION_HEADER],
        request=ReviewUpdateSerializer,
        responses={200: ReviewSerializer, 400: ERROR, 403: ERROR, 404: ERROR},
    )
    def patch(self, request, slug: str, review_id: int):
        session_id = session_id_from(request)
        if not session_id:
            return missing_session_response()
        product, error = product_or_error(slug)
        if error is not None:
            return error
        serializer = ReviewUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            review = update_review(
                product=product, review_id=review_id, session_id=session_id, **serializer.validated_data
            )
        except ReviewError as exc:
            return Response({"detail": exc.message}, status=exc.status_code)
        return Response(self.get_serializer(review).data)


class ProductReviewHelpfulView(generics.GenericAPIView):
    serializer_class = ReviewSerializer
    throttle_scope = "reviews_write"
    throttle_classes = [SettingsScopedRateThrottle, AnonRateThrottle]

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Mark review helpful",
        request=None,
        responses={200: ReviewSerializer, 404: ERROR},
    )
    def post(self, request, slug: str, review_id: int):
        product, error = product_or_error(slug)
        if error is not None:
            return error
        review = mark_review_helpful(product=product, review_id=review_id)
        if review is None:
            return Response({"detail": "Review not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(self.get_serializer(review).data)


class ProductReviewSummaryView(generics.GenericAPIView):
    serializer_class = ReviewSummarySerializer
    throttle_scope = "catalog"
    throttle_classes = [SettingsScopedRateThrottle, AnonRateThrottle]

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Review summary",
        description="Average rating, number of reviews and the count per star rating.",
        responses={200: ReviewSummarySerializer, 404: ERROR},
        examples=[
            OpenApiExample(
                "Summary",
                value={
                    "average_rating": "4.50",
                    "total_reviews": 2,
                    "rating_distribution": {"5": 1, "4": 1, "3": 0, "2": 0, "1": 0},
                },
            )
        ],
    )
    def get(self, request, slug: str):
        product, error = product_or_error(slug)
        if error is not None:
            return error
        result = selectors.review_summary(product=product)
        if not result.ok:
            return Response({"detail": result.error}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(self.get_serializer(result.value).data)
