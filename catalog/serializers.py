"""Serializers for the catalog app: read-only products and customer reviews."""

from rest_framework import serializers

from .models import Product, Review


class ProductImageSerializer(serializers.Serializer):
    url = serializers.URLField()
    alt = serializers.CharField(required=False, allow_blank=True, default="")
    is_main = serializers.BooleanField(required=False, default=False)
    order = serializers.IntegerField(required=False, default=0)


class ProductListSerializer(serializers.ModelSerializer):
    main_image_url = serializers.CharField(read_only=True)
    is_discounted = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "brand",
            "slug",
            "category",
            "price",
            "original_price",
            "is_discounted",
            "currency",
            "main_image_url",
            "in_stock",
            "is_limited_edition",
            "is_new_arrival",
            "is_bestseller",
            "rating",
        ]


class ProductDetailSerializer(ProductListSerializer):
    images = ProductImageSerializer(many=True)

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            "sku",
            "short_description",
            "description",
            "images",
            "stock_count",
            "review_count",
            "created_at",
            "updated_at",
        ]


class ReviewSerializer(serializers.ModelSerializer):
    class Meta:
        model = Review
        fields = [
            "id",
            "author_name",
            "rating",
            "title",
            "content",
            "verified_purchase",
            "helpful_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ReviewCreateSerializer(serializers.Serializer):
    author_name = serializers.CharField(max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    content = serializers.CharField(required=False, allow_blank=True, default="")


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    title = serializers.CharField(max_length=200, required=False, allow_blank=True)
    content = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide rating, title or content.")
        return attrs


class ReviewSummarySerializer(serializers.Serializer):
    average_rating = serializers.DecimalField(max_digits=3, decimal_places=2)
    total_reviews = serializers.IntegerField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField())
