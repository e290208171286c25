"""Admin registration for cart models.

Carts are shown with their lines inline for support lookups by session id.
"""

from django.contrib import admin, messages

from .models import Cart, CartItem
from .selectors import cart_totals
from .services import clear_cart


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "size", "quantity", "unit_price", "original_price", "created_at")
    readonly_fields = ("created_at",)
    raw_id_fields = ("product",)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "session_id", "currency", "is_open", "total_items", "updated_at", "created_at")
    list_filter = ("currency", "is_open")
    search_fields = ("session_id",)
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [CartItemInline]

    @admin.display(description="Items")
    def total_items(self, obj):
        return cart_totals(cart=obj)["total_items"]

    @admin.action(description="Clear cart (remove all lines)")
    def action_clear_cart(self, request, queryset):
        cleared = 0
        for cart in queryset:
            clear_cart(session_id=cart.session_id)
            cleared += 1
        if cleared:
            messages.success(request, f"Cleared {cleared} cart(s).")

    actions = ["action_clear_cart"]


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "cart", "product", "size", "quantity", "unit_price", "updated_at")
    search_fields = ("sku", "product_name", "cart__session_id")
    ordering = ("id",)
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("cart", "product")
