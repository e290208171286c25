"""Serializers for the session wishlist."""

from catalog.serializers import ProductListSerializer
from rest_framework import serializers

from .selectors import wishlist_product_ids, wishlist_products


class WishlistItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()


class WishlistReadSerializer(serializers.Serializer):
    """Saved product ids in saving order, the products still on sale, and the count."""

    items = serializers.ListField(child=serializers.IntegerField())
    products = ProductListSerializer(many=True)
    count = serializers.IntegerField()

    @classmethod
    def from_wishlist(cls, *, wishlist):
        items = wishlist_product_ids(wishlist=wishlist)
        return cls({"items": items, "products": wishlist_products(wishlist=wishlist), "count": len(items)})
