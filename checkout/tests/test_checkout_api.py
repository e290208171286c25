import uuid
from datetime import timedelta

import pytest
from cart.models import CartItem
from checkout.models import CheckoutSession
from checkout.tests.conftest import FAKE_PROVIDERS
from django.conf import settings
from django.test import override_settings
from django.utils import timezone
from orders.models import Order
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def fake_providers():
    with override_settings(PAYMENT_PROVIDERS=FAKE_PROVIDERS):
        yield


@pytest.fixture
def client():
    return APIClient(HTTP_X_SESSION_ID="guest-1")


def _start(client):
    resp = client.post("/api/v1/checkout/", {}, format="json")
    assert resp.status_code in (200, 201), resp.content
    return resp.json()["key"]


def test_start_requires_session_header():
    resp = APIClient().post("/api/v1/checkout/", {}, format="json")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "X-Session-Id header is required."


def test_start_with_empty_cart_is_rejected(client):
    resp = client.post("/api/v1/checkout/", {}, format="json")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Your cart is empty."


def test_start_issues_key_and_reuses_it(client, filled_cart):
    first = client.post("/api/v1/checkout/", {}, format="json")
    again = client.post("/api/v1/checkout/", {}, format="json")

    assert first.status_code == 201
    assert again.status_code == 200
    body = first.json()
    assert again.json()["key"] == body["key"]
    assert body["state"] == "editing"
    assert body["totals"] == {"subtotal": "600.00", "shipping": "0.00", "tax": "48.00", "total": "648.00"}
    assert body["available_payment_methods"] == ["card", "paypal"]
    assert body["confirmation"] is None


def test_card_checkout_end_to_end(client, filled_cart, form):
    key = _start(client)

    resp = client.post(f"/api/v1/checkout/{key}/submit/", form, format="json")

    assert resp.status_code == 201
    order_number = resp.json()["confirmation"]["order_id"]
    assert Order.objects.filter(number=order_number).exists()
    assert CartItem.objects.filter(cart=filled_cart).count() == 0

    detail = client.get(f"/api/v1/checkout/{key}/")
    assert detail.status_code == 200
    assert detail.json()["state"] == "succeeded"
    assert detail.json()["order"]["number"] == order_number
    assert detail.json()["totals"]["total"] == "648.00"

    replay = client.post(f"/api/v1/checkout/{key}/submit/", {}, format="json")
    assert replay.status_code == 200
    assert replay.json()["confirmation"]["order_id"] == order_number
    assert Order.objects.count() == 1


def test_submit_reports_field_errors(client, filled_cart, form):
    key = _start(client)

    resp = client.post(f"/api/v1/checkout/{key}/submit/", {**form, "email": "bad", "phone": ""}, format="json")

    assert resp.status_code == 400
    assert resp.json()["email"] == ["Please enter a valid email"]
    assert resp.json()["phone"] == ["Phone number is required"]


def test_declined_payment_returns_402_and_keeps_cart(client, filled_cart, form):
    key = _start(client)

    resp = client.post(
        f"/api/v1/checkout/{key}/submit/", {**form, "card_payment_method": "pm_declined"}, format="json"
    )

    assert resp.status_code == 402
    assert resp.json()["error"] == "Your card was declined."
    assert CartItem.objects.filter(cart=filled_cart).count() == 1
    assert client.get(f"/api/v1/checkout/{key}/").json()["last_error"] == "Your card was declined."


def test_regional_method_outside_region_falls_back_to_card(client, filled_cart, form):
    key = _start(client)

    resp = client.post(f"/api/v1/checkout/{key}/submit/", {**form, "payment_method": "upi"}, format="json")

    assert resp.status_code == 201
    assert resp.json()["confirmation"]["payment_method"] == "card"


def test_regional_checkout_with_overlay_confirmation(client, filled_cart, form):
    resp = client.post("/api/v1/checkout/", {"currency": "INR", "country": "IN"}, format="json")
    key = resp.json()["key"]
    assert resp.json()["available_payment_methods"] == ["card", "upi", "wallet", "bank-transfer", "paypal"]

    data = {**form, "currency": "INR", "country": "IN", "payment_method": "wallet", "card_payment_method": ""}
    submitted = client.post(f"/api/v1/checkout/{key}/submit/", data, format="json")
    assert submitted.status_code == 202
    params = submitted.json()["next_action"]["params"]
    assert params["method"] == "wallet"

    confirmed = client.post(
        f"/api/v1/checkout/{key}/confirm/",
        {"razorpay_order_id": params["order_id"], "razorpay_payment_id": "pay_9", "razorpay_signature": "sig"},
        format="json",
    )
    assert confirmed.status_code == 201
    assert confirmed.json()["confirmation"]["payment_id"] == "pay_9"


def test_unknown_or_foreign_key_is_not_found(client, filled_cart, form):
    key = _start(client)

    assert client.get(f"/api/v1/checkout/{uuid.uuid4()}/").status_code == 404
    stranger = APIClient(HTTP_X_SESSION_ID="guest-2")
    assert stranger.get(f"/api/v1/checkout/{key}/").status_code == 404
    assert stranger.post(f"/api/v1/checkout/{key}/submit/", form, format="json").status_code == 404


def test_changed_cart_conflicts(client, filled_cart, form):
    key = _start(client)
    product_id = filled_cart.items.first().product_id
    client.patch(f"/api/v1/cart/items/{product_id}/", {"quantity": 5}, format="json")

    resp = client.post(f"/api/v1/checkout/{key}/submit/", form, format="json")

    assert resp.status_code == 409


@pytest.mark.parametrize(
    "query,methods,selected",
    [
        ("", ["card", "paypal"], "card"),
        ("?currency=INR&country=IN&selected=upi", ["card", "upi", "wallet", "bank-transfer", "paypal"], "upi"),
        ("?currency=USD&country=US&selected=upi", ["card", "paypal"], "card"),
        ("?currency=EUR&country=IN", ["card", "upi", "wallet", "bank-transfer", "paypal"], "card"),
    ],
)
def test_payment_methods_by_region(query, methods, selected):
    resp = APIClient().get(f"/api/v1/checkout/payment-methods/{query}")

    assert resp.status_code == 200
    assert resp.json()["methods"] == methods
    assert resp.json()["selected"] == selected


def test_payment_methods_rejects_unknown_currency():
    resp = APIClient().get("/api/v1/checkout/payment-methods/?currency=XYZ")
    assert resp.status_code == 400


def test_checkout_write_scope_is_throttled(client, filled_cart):
    rf = {**settings.REST_FRAMEWORK}
    rf["DEFAULT_THROTTLE_RATES"] = {**rf["DEFAULT_THROTTLE_RATES"], "checkout_write": "1/min"}
    with override_settings(REST_FRAMEWORK=rf):
        assert client.post("/api/v1/checkout/", {}, format="json").status_code == 201
        assert client.post("/api/v1/checkout/", {}, format="json").status_code == 429


def test_closed_overlay_does_not_lock_the_checkout(client, filled_cart, form):
    resp = client.post("/api/v1/checkout/", {"currency": "INR", "country": "IN"}, format="json")
    key = resp.json()["key"]
    data = {**form, "currency": "INR", "country": "IN", "payment_method": "upi", "card_payment_method": ""}
    first = client.post(f"/api/v1/checkout/{key}/submit/", data, format="json")
    assert first.status_code == 202

    restarted = client.post("/api/v1/checkout/", {}, format="json")
    assert restarted.status_code == 200
    assert restarted.json()["key"] == key
    assert restarted.json()["state"] == "editing"

    second = client.post(f"/api/v1/checkout/{key}/submit/", data, format="json")
    assert second.status_code == 202
    assert second.json()["next_action"]["params"]["order_id"] != first.json()["next_action"]["params"]["order_id"]

    stale = client.post(
        f"/api/v1/checkout/{key}/confirm/",
        {"razorpay_order_id": first.json()["next_action"]["params"]["order_id"], "razorpay_payment_id": "pay_1"},
        format="json",
    )
    assert stale.status_code == 402
    assert stale.json()["error"] == "Payment verification failed"


def test_submission_without_currency_uses_the_checkout_currency(client, filled_cart, form):
    resp = client.post("/api/v1/checkout/", {"currency": "INR", "country": "IN"}, format="json")
    key = resp.json()["key"]
    data = {k: v for k, v in form.items() if k not in ("currency", "country")}

    paid = client.post(f"/api/v1/checkout/{key}/submit/", data, format="json")

    assert paid.status_code == 201
    assert Order.objects.get().currency == "INR"


def test_expired_checkout_in_flight_answers_gone(client, filled_cart, form):
    key = _start(client)
    CheckoutSession.objects.filter(key=key).update(
        state=CheckoutSession.STATE_SUBMITTING, expires_at=timezone.now() - timedelta(minutes=1)
    )

    resp = client.post(f"/api/v1/checkout/{key}/submit/", form, format="json")

    assert resp.status_code == 410
