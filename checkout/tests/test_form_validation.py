from types import SimpleNamespace

import pytest
from checkout.serializers import CheckoutFormSerializer
from payments.manager import PaymentManager


def test_required_fields_report_form_messages():
    serializer = CheckoutFormSerializer(data={})

    assert serializer.is_valid() is False
    errors = serializer.errors
    assert errors["email"] == ["Email is required"]
    assert errors["first_name"] == ["First name is required"]
    assert errors["zip_code"] == ["ZIP code is required"]
    assert errors["phone"] == ["Phone number is required"]


def test_blank_values_count_as_missing(form):
    serializer = CheckoutFormSerializer(data={**form, "city": ""})

    assert serializer.is_valid() is False
    assert serializer.errors["city"] == ["City is required"]


@pytest.mark.parametrize("email", ["not-an-email", "ada@example", "ada @example.com"])
def test_invalid_email_is_rejected(form, email):
    serializer = CheckoutFormSerializer(data={**form, "email": email})

    assert serializer.is_valid() is False
    assert serializer.errors["email"] == ["Please enter a valid email"]


def test_separate_billing_requires_billing_fields(form):
    serializer = CheckoutFormSerializer(data={**form, "billing_same_as_shipping": False, "billing_city": "Paris"})

    assert serializer.is_valid() is False
    assert serializer.errors["billing_first_name"] == ["Billing first name is required"]
    assert serializer.errors["billing_zip_code"] == ["Billing ZIP code is required"]
    assert "billing_city" not in serializer.errors


def test_card_without_token_is_left_to_the_card_widget(form, manager):
    serializer = CheckoutFormSerializer(data={**form, "card_payment_method": ""}, context={"manager": manager})

    assert serializer.is_valid(), serializer.errors
    assert serializer.validated_data["payment_method"] == "card"
    assert serializer.validated_data["card_payment_method"] == ""


def test_region_defaults_to_the_checkout_session(form, manager):
    session = SimpleNamespace(currency="INR", country="IN")
    data = {key: value for key, value in form.items() if key not in ("currency", "country")}
    serializer = CheckoutFormSerializer(
        data={**data, "payment_method": "upi"}, context={"manager": manager, "session": session}
    )

    assert serializer.is_valid(), serializer.errors
    assert serializer.validated_data["currency"] == "INR"
    assert serializer.validated_data["country"] == "IN"
    assert serializer.validated_data["payment_method"] == "upi"


def test_region_defaults_to_usd_and_us_without_session(form):
    data = {key: value for key, value in form.items() if key not in ("currency", "country")}
    serializer = CheckoutFormSerializer(data=data)

    assert serializer.is_valid(), serializer.errors
    assert (serializer.validated_data["currency"], serializer.validated_data["country"]) == ("USD", "US")


def test_regional_method_falls_back_to_card_outside_its_region(form, manager):
    serializer = CheckoutFormSerializer(data={**form, "payment_method": "upi"}, context={"manager": manager})

    assert serializer.is_valid(), serializer.errors
    assert serializer.validated_data["payment_method"] == "card"


def test_regional_method_kept_for_inr(form, manager):
    data = {**form, "payment_method": "upi", "currency": "INR", "country": "in", "card_payment_method": ""}
    serializer = CheckoutFormSerializer(data=data, context={"manager": manager})

    assert serializer.is_valid(), serializer.errors
    assert serializer.validated_data["payment_method"] == "upi"
    assert serializer.validated_data["country"] == "IN"


def test_missing_method_defaults_to_card_without_manager(form):
    data = {**form}
    data.pop("payment_method")
    serializer = CheckoutFormSerializer(data=data)

    assert serializer.is_valid(), serializer.errors
    assert serializer.validated_data["payment_method"] == "card"


def test_no_offered_method_is_a_validation_error(form):
    serializer = CheckoutFormSerializer(data=form, context={"manager": PaymentManager([])})

    assert serializer.is_valid() is False
    assert serializer.errors["payment_method"] == ["Unsupported payment method"]


def test_customer_snapshot_copies_shipping_into_billing(form):
    serializer = CheckoutFormSerializer(data=form)
    assert serializer.is_valid(), serializer.errors

    snapshot = CheckoutFormSerializer.customer_snapshot(serializer.validated_data)

    assert snapshot["name"] == "Ada Lovelace"
    assert snapshot["email"] == "ada@example.com"
    assert snapshot["billing_address"] == snapshot["shipping_address"]
    assert snapshot["shipping_address"]["zip_code"] == "NW1 6XE"
