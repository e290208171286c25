from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("product", "product_name", "sku", "size", "quantity", "unit_price")
    readonly_fields = fields
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "number",
        "status",
        "tracking_number",
        "email",
        "total",
        "currency",
        "payment_method",
        "created_at",
    )
    list_filter = ("status", "currency", "payment_method", "created_at")
    search_fields = ("number", "email", "customer_name", "payment_reference", "tracking_number")
    date_hierarchy = "created_at"
    readonly_fields = ("number", "payment_reference", "created_at", "updated_at")
    inlines = [OrderItemInline]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "product", "size", "quantity", "unit_price")
    list_filter = ("order",)
    search_fields = ("sku", "product_name", "order__number")
