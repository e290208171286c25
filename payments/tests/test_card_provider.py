from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import stripe
from payments.providers import PaymentError, PaymentRequest, ProviderIntent, StripeCardProvider


def _request():
    return PaymentRequest(
        reference="MH-ABC123",
        amount=Decimal("564.99"),
        currency="USD",
        method="card",
        customer={"name": "Ada Lovelace", "email": "ada@example.com"},
    )


def _intent():
    return ProviderIntent(provider="stripe", reference="pi_123", client_secret="pi_123_secret")


def test_create_intent_sends_minor_units_and_idempotency_key():
    provider = StripeCardProvider(api_key="sk_test_1", publishable_key="pk_test_1")
    created = SimpleNamespace(id="pi_123", client_secret="pi_123_secret", status="requires_payment_method")
    with patch("payments.providers.card.stripe.PaymentIntent.create", return_value=created) as create:
        intent = provider.create_intent(_request())

    kwargs = create.call_args.kwargs
    assert kwargs["amount"] == 56499
    assert kwargs["currency"] == "usd"
    assert kwargs["payment_method_types"] == ["card"]
    assert kwargs["receipt_email"] == "ada@example.com"
    assert kwargs["idempotency_key"] == "intent-MH-ABC123"
    assert kwargs["api_key"] == "sk_test_1"
    assert intent.reference == "pi_123"
    assert provider.client_params(intent, _request()) == {
        "publishable_key": "pk_test_1",
        "client_secret": "pi_123_secret",
    }


def test_create_intent_without_key_is_not_initialized():
    with pytest.raises(PaymentError) as exc:
        StripeCardProvider(api_key="").create_intent(_request())
    assert exc.value.message == "Stripe not initialized"


def test_create_intent_stripe_error_becomes_payment_error():
    provider = StripeCardProvider(api_key="sk_test_1")
    with patch("payments.providers.card.stripe.PaymentIntent.create", side_effect=stripe.StripeError("bad key")):
        with pytest.raises(PaymentError) as exc:
            provider.create_intent(_request())
    assert exc.value.message == "Failed to create payment intent"


def test_confirm_with_payment_method_succeeds_only_on_succeeded_status():
    provider = StripeCardProvider(api_key="sk_test_1")
    with patch(
        "payments.providers.card.stripe.PaymentIntent.confirm",
        return_value=SimpleNamespace(id="pi_123", status="succeeded"),
    ) as confirm:
        result = provider.confirm(_intent(), {"payment_method": "pm_card_visa"}, _request())
    assert confirm.call_args.args == ("pi_123",)
    assert confirm.call_args.kwargs["payment_method"] == "pm_card_visa"
    assert result.success is True
    assert result.payment_id == "pi_123"

    with patch(
        "payments.providers.card.stripe.PaymentIntent.confirm",
        return_value=SimpleNamespace(id="pi_123", status="requires_action"),
    ):
        result = provider.confirm(_intent(), {"payment_method": "pm_card_visa"}, _request())
    assert result.success is False
    assert result.error == "Payment was not completed successfully"


def test_confirm_client_confirmed_intent_retrieves_status():
    provider = StripeCardProvider(api_key="sk_test_1")
    with patch(
        "payments.providers.card.stripe.PaymentIntent.retrieve",
        return_value=SimpleNamespace(id="pi_123", status="succeeded"),
    ) as retrieve:
        result = provider.confirm(_intent(), {"payment_intent": "pi_123"}, _request())
    retrieve.assert_called_once_with("pi_123", api_key="sk_test_1")
    assert result.success is True


def test_confirm_rejects_foreign_intent_and_card_errors():
    provider = StripeCardProvider(api_key="sk_test_1")
    foreign = provider.confirm(_intent(), {"payment_intent": "pi_other"}, _request())
    assert foreign.error == "Payment verification failed"

    with patch("payments.providers.card.stripe.PaymentIntent.confirm", side_effect=stripe.StripeError("declined")):
        result = provider.confirm(_intent(), {"payment_method": "pm_card_chargeDeclined"}, _request())
    assert result.success is False
    assert result.error == "Payment failed"
