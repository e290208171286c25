"""Cart serializers for read and write operations."""

from common.choices import Currency
from rest_framework import serializers

from .models import CartItem
from .selectors import cart_totals


class CartItemReadSerializer(serializers.ModelSerializer):
    """Read serializer for a cart line."""

    product_id = serializers.IntegerField(source="product.id")
    added_at = serializers.DateTimeField(read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "product_id",
            "size",
            "quantity",
            "product_name",
            "sku",
            "unit_price",
            "original_price",
            "image_url",
            "line_total",
            "added_at",
        ]


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart summary and lines."""

    id = serializers.IntegerField()
    session_id = serializers.CharField()
    currency = serializers.CharField()
    is_open = serializers.BooleanField()
    items = CartItemReadSerializer(many=True)
    total_items = serializers.IntegerField()
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    savings = serializers.DecimalField(max_digits=12, decimal_places=2)

    @classmethod
    def from_cart(cls, *, cart):
        totals = cart_totals(cart=cart)
        return cls(
            {
                "id": cart.id,
                "session_id": cart.session_id,
                "currency": cart.currency,
                "is_open": cart.is_open,
                "items": list(cart.items.select_related("product").all()),
                **totals,
            }
        )


class AddItemSerializer(serializers.Serializer):
    """Write serializer for adding a product to the cart."""

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    size = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")


class UpdateQuantitySerializer(serializers.Serializer):
    """Write serializer for setting a line quantity; zero or less removes the line."""

    quantity = serializers.IntegerField()
    size = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")


class CartCurrencySerializer(serializers.Serializer):
    currency = serializers.ChoiceField(choices=Currency.choices)
