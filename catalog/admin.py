"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Product, Review


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "brand", "sku", "category", "price", "original_price", "stock_count", "is_active")
    search_fields = ("name", "brand", "sku", "slug")
    list_filter = ("category", "is_active", "is_limited_edition", "is_bestseller", "is_new_arrival")
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ("created_at", "updated_at")

    @admin.action(description="Deactivate selected products")
    def action_deactivate(self, request, queryset):
        # Products referenced by carts and orders are hidden, never deleted.
        updated = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated {updated} product(s).")

    actions = ["action_deactivate"]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "product", "author_name", "rating", "verified_purchase", "helpful_count", "created_at")
    list_filter = ("rating", "verified_purchase")
    search_fields = ("author_name", "email", "title", "product__name")
    raw_id_fields = ("product",)
    readonly_fields = ("session_id", "verified_purchase", "helpful_count", "created_at", "updated_at")
