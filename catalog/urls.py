"""URL routes for the catalog app."""

from django.urls import path

from .views import (
    ProductDetailView,
    ProductListView,
    ProductReviewDetailView,
    ProductReviewHelpfulView,
    ProductReviewListView,
    ProductReviewSummaryView,
)

app_name = "catalog"

urlpatterns = [
    path("products/", ProductListView.as_view(), name="product-list"),
    path("products/<str:slug>/", ProductDetailView.as_view(), name="product-detail"),
    path("products/<str:slug>/reviews/", ProductReviewListView.as_view(), name="product-reviews"),
    path("products/<str:slug>/reviews/summary/", ProductReviewSummaryView.as_view(), name="product-review-summary"),
    path("products/<str:slug>/reviews/<int:review_id>/", ProductReviewDetailView.as_view(), name="product-review"),
    path(
        "products/<str:slug>/reviews/<int:review_id>/helpful/",
        ProductReviewHelpfulView.as_view(),
        name="product-review-helpful",
    ),
]
