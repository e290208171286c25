"""Checkout URL routes (v1)."""

from django.urls import path

from .views import CheckoutConfirmView, CheckoutDetailView, CheckoutSubmitView, CheckoutView, PaymentMethodsView

app_name = "checkout"

urlpatterns = [
    path("", CheckoutView.as_view(), name="checkout-start"),
    path("payment-methods/", PaymentMethodsView.as_view(), name="checkout-payment-methods"),
    path("<uuid:key>/", CheckoutDetailView.as_view(), name="checkout-detail"),
    path("<uuid:key>/submit/", CheckoutSubmitView.as_view(), name="checkout-submit"),
    path("<uuid:key>/confirm/", CheckoutConfirmView.as_view(), name="checkout-confirm"),
]
