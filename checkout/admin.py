from django.contrib import admin

from .models import CheckoutSession, PaymentAttempt


class PaymentAttemptInline(admin.TabularInline):
    model = PaymentAttempt
    extra = 0
    fields = ("reference", "method", "amount", "currency", "status", "provider", "provider_reference", "error")
    readonly_fields = fields
    can_delete = False


@admin.register(CheckoutSession)
class CheckoutSessionAdmin(admin.ModelAdmin):
    list_display = ("key", "cart", "state", "currency", "country", "order", "expires_at", "created_at")
    list_filter = ("state", "currency", "country")
    search_fields = ("key", "cart__session_id", "order__number")
    readonly_fields = ("key", "cart_fingerprint", "confirmation", "created_at", "updated_at")
    raw_id_fields = ("cart", "order")
    inlines = [PaymentAttemptInline]


@admin.register(PaymentAttempt)
class PaymentAttemptAdmin(admin.ModelAdmin):
    list_display = ("reference", "session", "method", "amount", "currency", "status", "provider", "created_at")
    list_filter = ("status", "method", "provider", "currency")
    search_fields = ("reference", "provider_intent", "provider_reference", "session__key")
    readonly_fields = ("reference", "customer", "lines", "totals", "created_at", "updated_at")
    date_hierarchy = "created_at"
