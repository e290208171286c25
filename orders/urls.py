"""Order URL routes (v1)."""

from django.urls import path

from .views import OrderDetailView, OrderStatusView

app_name = "orders"

urlpatterns = [
    path("<str:number>/", OrderDetailView.as_view(), name="order-detail"),
    path("<str:number>/status/", OrderStatusView.as_view(), name="order-status"),
]
