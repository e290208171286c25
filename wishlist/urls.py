"""Wishlist URL routes (v1)."""

from django.urls import path

from .views import WishlistAddItemView, WishlistClearView, WishlistItemView, WishlistToggleView, WishlistView

app_name = "wishlist"

urlpatterns = [
    path("", WishlistView.as_view(), name="wishlist-detail"),
    path("items/", WishlistAddItemView.as_view(), name="wishlist-add-item"),
    path("items/<int:product_id>/", WishlistItemView.as_view(), name="wishlist-item"),
    path("items/<int:product_id>/toggle/", WishlistToggleView.as_view(), name="wishlist-toggle"),
    path("clear/", WishlistClearView.as_view(), name="wishlist-clear"),
]
