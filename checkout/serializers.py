"""Checkout serializers: the checkout form and session read models."""

import re

from common.choices import Currency, PaymentMethod
from orders.serializers import OrderSerializer
from payments.providers import UnsupportedPaymentMethod
from rest_framework import serializers

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

BILLING_FIELDS = {
    "billing_first_name": "Billing first name is required",
    "billing_last_name": "Billing last name is required",
    "billing_address": "Billing address is required",
    "billing_city": "Billing city is required",
    "billing_state": "Billing state is required",
    "billing_zip_code": "Billing ZIP code is required",
}


def required_text(message: str, **kwargs):
    return serializers.CharField(
        error_messages={"required": message, "blank": message, "null": message},
        **kwargs,
    )


def optional_text(**kwargs):
    return serializers.CharField(required=False, allow_blank=True, default="", **kwargs)


class StartCheckoutSerializer(serializers.Serializer):
    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    country = serializers.CharField(max_length=2, min_length=2, required=False)

    def validate_country(self, value):
        return value.upper()


class CheckoutFormSerializer(serializers.Serializer):
    """Contact, shipping, billing and payment fields of the checkout form.

    Currency and country default to the checkout session's. The selected
    payment method falls back to the first method offered for the chosen
    currency and country. Card details are never validated here: a card
    submission either carries the card widget's payment method token or is
    confirmed in the browser by the widget.
    """

    email = required_text("Email is required", max_length=254)
    first_name = required_text("First name is required", max_length=100)
    last_name = required_text("Last name is required", max_length=100)
    address = required_text("Address is required", max_length=255)
    apartment = optional_text(max_length=100)
    city = required_text("City is required", max_length=100)
    state = required_text("State is required", max_length=100)
    zip_code = required_text("ZIP code is required", max_length=20)
    country = serializers.CharField(max_length=2, min_length=2, required=False)
    phone = required_text("Phone number is required", max_length=32)

    billing_same_as_shipping = serializers.BooleanField(required=False, default=True)
    billing_first_name = optional_text(max_length=100)
    billing_last_name = optional_text(max_length=100)
    billing_address = optional_text(max_length=255)
    billing_apartment = optional_text(max_length=100)
    billing_city = optional_text(max_length=100)
    billing_state = optional_text(max_length=100)
    billing_zip_code = optional_text(max_length=20)
    billing_country = optional_text(max_length=2)

    currency = serializers.ChoiceField(choices=Currency.choices, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, required=False, allow_null=True)
    card_payment_method = optional_text(max_length=255)
    newsletter = serializers.BooleanField(required=False, default=False)

    def validate_email(self, value):
        value = value.strip()
        if not EMAIL_RE.match(value):
            raise serializers.ValidationError("Please enter a valid email")
        return value

    def validate_country(self, value):
        return value.upper()

    def validate(self, attrs):
        session = self.context.get("session")
        attrs.setdefault("currency", session.currency if session is not None else Currency.USD)
        attrs.setdefault("country", session.country if session is not None else "US")

        errors = {}
        if not attrs.get("billing_same_as_shipping", True):
            for field, message in BILLING_FIELDS.items():
                if not attrs.get(field):
                    errors[field] = [message]

        manager = self.context.get("manager")
        if manager is not None:
            try:
                attrs["payment_method"] = manager.resolve_method(
                    attrs.get("payment_method"), attrs["currency"], attrs["country"]
                )
            except UnsupportedPaymentMethod as exc:
                raise serializers.ValidationError({"payment_method": [exc.message]})
        elif not attrs.get("payment_method"):
            attrs["payment_method"] = PaymentMethod.CARD

        if errors:
            raise serializers.ValidationError(errors)
        return attrs

    @staticmethod
    def customer_snapshot(data: dict) -> dict:
        shipping = {
            "first_name": data["first_name"],
            "last_name": data["last_name"],
            "address": data["address"],
            "apartment": data.get("apartment", ""),
            "city": data["city"],
            "state": data["state"],
            "zip_code": data["zip_code"],
            "country": data["country"],
            "phone": data["phone"],
        }
        if data.get("billing_same_as_shipping", True):
            billing = dict(shipping)
        else:
            billing = {
                "first_name": data["billing_first_name"],
                "last_name": data["billing_last_name"],
                "address": data["billing_address"],
                "apartment": data.get("billing_apartment", ""),
                "city": data["billing_city"],
                "state": data["billing_state"],
                "zip_code": data["billing_zip_code"],
                "country": (data.get("billing_country") or data["country"]).upper(),
            }
        return {
            "email": data["email"],
            "name": f"{data['first_name']} {data['last_name']}".strip(),
            "phone": data["phone"],
            "newsletter": data.get("newsletter", False),
            "shipping_address": shipping,
            "billing_address": billing,
        }


class ConfirmPaymentSerializer(serializers.Serializer):
    """Client confirmation of a hosted payment step.

    Regional overlay callbacks send the three `razorpay_*` fields; a closed
    overlay sends `dismissed`. Card payments confirmed in the browser send
    the PaymentIntent id.
    """

    dismissed = serializers.BooleanField(required=False, default=False)
    razorpay_payment_id = optional_text(max_length=128)
    razorpay_order_id = optional_text(max_length=128)
    razorpay_signature = optional_text(max_length=256)
    payment_intent = optional_text(max_length=128)
    payment_method = optional_text(max_length=255)

    def validate(self, attrs):
        return {key: value for key, value in attrs.items() if value not in ("", None, False)}


class TotalsSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    shipping = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class CheckoutSessionSerializer(serializers.Serializer):
    key = serializers.UUIDField()
    state = serializers.CharField()
    currency = serializers.CharField()
    country = serializers.CharField()
    last_error = serializers.CharField(allow_blank=True)
    expires_at = serializers.DateTimeField()
    totals = TotalsSerializer()
    available_payment_methods = serializers.ListField(child=serializers.CharField())
    confirmation = serializers.JSONField(allow_null=True)
    order = OrderSerializer(allow_null=True)


class PaymentMethodsSerializer(serializers.Serializer):
    currency = serializers.CharField()
    country = serializers.CharField()
    methods = serializers.ListField(child=serializers.CharField())
    selected = serializers.CharField(allow_null=True)
