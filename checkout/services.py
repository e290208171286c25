"""Checkout orchestration.

A checkout session moves editing -> submitting -> succeeded, or back from
submitting to editing when the payment fails. The session key is issued by
the server and bound to a fingerprint of the cart contents. Retries for the
same contents reuse the key, an in-flight submission answers 409, and a
succeeded session replays its stored confirmation without charging again.
"""

import hashlib
import json
import logging
from typing import Optional, Tuple

from cart.models import Cart
from cart.selectors import cart_fingerprint_lines, cart_totals, get_active_cart_for_session
from cart.services import clear_cart_instance
from django.db import transaction
from django.utils import timezone
from orders.services import create_order, notify_order_placed, snapshot_cart_lines
from payments.manager import PaymentManager, get_payment_manager
from payments.providers import PaymentRequest, PaymentResult, ProviderIntent

from .models import CheckoutSession, PaymentAttempt
from .pricing import price_order
from .serializers import CheckoutFormSerializer

logger = logging.getLogger("maison.checkout")

PAYMENT_FAILED_STATUS = 402
PAYMENT_ABANDONED = "Payment abandoned"


class CheckoutError(Exception):
    """Raised for checkout failures carrying an HTTP status."""

    status_code = 400

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CheckoutInProgress(CheckoutError):
    status_code = 409

    def __init__(self, message: str = "A payment for this checkout is already in progress."):
        super().__init__(message)


def compute_cart_fingerprint(cart: Cart) -> str:
    """Canonical SHA256 of the cart lines (product, size, quantity, unit price)."""

    payload = json.dumps(cart_fingerprint_lines(cart=cart), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def session_totals(session: CheckoutSession) -> dict:
    """Totals for a session: the paid attempt's once succeeded, else the live cart's."""

    if session.state == CheckoutSession.STATE_SUCCEEDED:
        attempt = session.attempts.filter(status=PaymentAttempt.STATUS_SUCCEEDED).first()
        if attempt is not None and attempt.totals:
            return attempt.totals
    return price_order(cart_totals(cart=session.cart)["total_price"])


@transaction.atomic
def start_checkout(*, session_id: str, currency: Optional[str] = None, country: Optional[str] = None) -> Tuple[CheckoutSession, bool]:
    """Issue (or reuse) the checkout session for the current cart contents.

    Returns `(session, created)`. An unexpired, unfinished session whose
    fingerprint matches the cart is reused.
    """

    cart = get_active_cart_for_session(session_id=session_id)
    cart = Cart.objects.select_for_update().get(id=cart.id)
    if not cart.items.exists():
        raise CheckoutError("Your cart is empty.")

    fingerprint = compute_cart_fingerprint(cart)
    session = (
        CheckoutSession.objects.filter(cart=cart, cart_fingerprint=fingerprint, expires_at__gt=timezone.now())
        .exclude(state=CheckoutSession.STATE_SUCCEEDED)
        .order_by("-created_at")
        .first()
    )
    if session is not None and session.state == CheckoutSession.STATE_SUBMITTING:
        session = CheckoutSession.objects.select_for_update().get(pk=session.pk)
        _release_client_step(session)

    created = session is None
    if created:
        session = CheckoutSession.objects.create(
            cart=cart,
            cart_fingerprint=fingerprint,
            currency=currency or cart.currency,
            country=country or "US",
        )
    else:
        changed = []
        if currency and currency != session.currency:
            session.currency = currency
            changed.append("currency")
        if country and country != session.country:
            session.country = country
            changed.append("country")
        if changed:
            session.save(update_fields=changed + ["updated_at"])

    event = "checkout.started" if created else "checkout.reused"
    logger.info(
        event,
        extra={"event": event, "checkout": str(session.key), "cart_id": cart.id, "session_id": session_id},
    )
    return session, created


def _release_client_step(session: CheckoutSession) -> bool:
    """Abandon an attempt left waiting on a hosted client step.

    The customer closed the overlay (or the card widget) without a callback
    reaching the server. The attempt is failed, the session returns to
    editing and the next submission opens a new attempt. A session whose
    attempt is still talking to its provider is left alone. Caller holds the
    session row lock.
    """

    attempt = (
        session.attempts.select_for_update().filter(status=PaymentAttempt.STATUS_REQUIRES_ACTION).first()
    )
    if attempt is None:
        return False
    attempt.status = PaymentAttempt.STATUS_FAILED
    attempt.error = PAYMENT_ABANDONED
    attempt.save(update_fields=["status", "error", "updated_at"])
    session.state = CheckoutSession.STATE_EDITING
    session.last_error = ""
    session.save(update_fields=["state", "last_error", "updated_at"])
    logger.info(
        "checkout.payment_abandoned",
        extra={"event": "checkout.payment_abandoned", "checkout": str(session.key), "attempt": attempt.reference},
    )
    return True


def get_checkout(*, key, session_id: str) -> CheckoutSession:
    try:
        return CheckoutSession.objects.select_related("cart", "order").get(key=key, cart__session_id=session_id)
    except CheckoutSession.DoesNotExist:
        raise CheckoutError("Checkout not found.", status_code=404)


def _locked_session(key, session_id: str) -> CheckoutSession:
    try:
        return (
            CheckoutSession.objects.select_for_update()
            .select_related("cart")
            .get(key=key, cart__session_id=session_id)
        )
    except CheckoutSession.DoesNotExist:
        raise CheckoutError("Checkout not found.", status_code=404)


def _replay(session: CheckoutSession) -> Tuple[dict, int]:
    logger.info("checkout.replayed", extra={"event": "checkout.replayed", "checkout": str(session.key)})
    return {"key": str(session.key), "state": session.state, "confirmation": session.confirmation, "replayed": True}, 200


def _payment_request(session: CheckoutSession, attempt: PaymentAttempt) -> PaymentRequest:
    customer = attempt.customer or {}
    return PaymentRequest(
        reference=attempt.reference,
        amount=attempt.amount,
        currency=attempt.currency,
        method=attempt.method,
        customer={
            "name": customer.get("name", ""),
            "email": customer.get("email", ""),
            "phone": customer.get("phone", ""),
        },
        shipping_address=customer.get("shipping_address", {}),
        description=f"Order #{attempt.reference}",
        metadata={"checkout": str(session.key)},
    )


def submit_checkout(
    *, key, session_id: str, data: dict, manager: Optional[PaymentManager] = None
) -> Tuple[dict, int]:
    """Price the cart, open a payment attempt and drive the provider.

    `data` is the validated checkout form. Card payments that carry the
    widget's token are confirmed in the same call. Providers with a hosted
    step answer 202 with the parameters the client needs, and the payment
    completes through `confirm_checkout`.
    """

    manager = manager or get_payment_manager()

    with transaction.atomic():
        session = _locked_session(key, session_id)
        if session.state == CheckoutSession.STATE_SUCCEEDED:
            return _replay(session)
        if session.is_expired:
            raise CheckoutError("Checkout session expired. Start checkout again.", status_code=410)
        if session.state == CheckoutSession.STATE_SUBMITTING and not _release_client_step(session):
            raise CheckoutInProgress()
        if not data:
            raise CheckoutError("Checkout details are required.")

        cart = Cart.objects.select_for_update().get(id=session.cart_id)
        if compute_cart_fingerprint(cart) != session.cart_fingerprint:
            raise CheckoutError("Your cart changed since checkout started. Start checkout again.", status_code=409)

        currency = data.get("currency") or session.currency
        country = data.get("country") or session.country
        totals = price_order(cart_totals(cart=cart)["total_price"])
        attempt = PaymentAttempt.objects.create(
            session=session,
            amount=totals["total"],
            currency=currency,
            method=data["payment_method"],
            customer=CheckoutFormSerializer.customer_snapshot(data),
            lines=snapshot_cart_lines(cart),
            totals={name: str(value) for name, value in totals.items()},
        )
        session.state = CheckoutSession.STATE_SUBMITTING
        session.currency = currency
        session.country = country
        session.last_error = ""
        session.save(update_fields=["state", "currency", "country", "last_error", "updated_at"])

    logger.info(
        "checkout.submitted",
        extra={
            "event": "checkout.submitted",
            "checkout": str(session.key),
            "attempt": attempt.reference,
            "method": attempt.method,
            "amount": str(attempt.amount),
            "currency": attempt.currency,
        },
    )

    request = _payment_request(session, attempt)
    intent, failure = manager.create_intent(request, country=session.country)
    if failure is not None:
        return _finish(session.key, attempt.id, failure)

    attempt.provider = intent.provider
    attempt.provider_intent = intent.reference
    token = data.get("card_payment_method")
    if manager.requires_client_action(intent) or not token:
        # Parked until confirm/ brings the client's callback or a new submission abandons it
        attempt.status = PaymentAttempt.STATUS_REQUIRES_ACTION
        attempt.save(update_fields=["provider", "provider_intent", "status", "updated_at"])
        return {
            "key": str(session.key),
            "state": CheckoutSession.STATE_SUBMITTING,
            "attempt": attempt.reference,
            "next_action": {
                "type": "client_confirmation",
                "provider": intent.provider,
                "method": attempt.method,
                "params": manager.client_params(intent, request),
            },
        }, 202

    attempt.save(update_fields=["provider", "provider_intent", "updated_at"])
    result = manager.confirm(intent, {"payment_method": token}, request)
    return _finish(session.key, attempt.id, result)


def confirm_checkout(
    *, key, session_id: str, payload: dict, manager: Optional[PaymentManager] = None
) -> Tuple[dict, int]:
    """Complete a payment awaiting the client's hosted step."""

    manager = manager or get_payment_manager()

    with transaction.atomic():
        session = _locked_session(key, session_id)
        if session.state == CheckoutSession.STATE_SUCCEEDED:
            return _replay(session)
        attempt = session.attempts.select_for_update().filter(status=PaymentAttempt.STATUS_REQUIRES_ACTION).first()
        if session.state != CheckoutSession.STATE_SUBMITTING or attempt is None:
            raise CheckoutError("No payment is awaiting confirmation.", status_code=409)

    intent = ProviderIntent(provider=attempt.provider, reference=attempt.provider_intent)
    result = manager.confirm(intent, payload, _payment_request(session, attempt))
    return _finish(session.key, attempt.id, result)


def _finish(key, attempt_id: int, result: PaymentResult) -> Tuple[dict, int]:
    """Move the attempt and its session to their terminal state for this try."""

    with transaction.atomic():
        session = CheckoutSession.objects.select_for_update().select_related("cart").get(key=key)
        attempt = PaymentAttempt.objects.select_for_update().get(id=attempt_id)
        if attempt.status not in (PaymentAttempt.STATUS_PENDING, PaymentAttempt.STATUS_REQUIRES_ACTION):
            # Settled by a concurrent confirmation
            if session.state == CheckoutSession.STATE_SUCCEEDED:
                return _replay(session)
            raise CheckoutError("This payment attempt is already settled.", status_code=409)

        if not result.success:
            attempt.status = PaymentAttempt.STATUS_FAILED
            attempt.error = result.error
            attempt.save(update_fields=["status", "error", "updated_at"])
            session.state = CheckoutSession.STATE_EDITING
            session.last_error = result.error
            session.save(update_fields=["state", "last_error", "updated_at"])
            logger.info(
                "checkout.payment_failed",
                extra={
                    "event": "checkout.payment_failed",
                    "checkout": str(session.key),
                    "attempt": attempt.reference,
                    "method": attempt.method,
                    "error": result.error,
                },
            )
            return {
                "key": str(session.key),
                "state": session.state,
                "error": result.error,
                "payment": result.as_dict(),
            }, PAYMENT_FAILED_STATUS

        attempt.status = PaymentAttempt.STATUS_SUCCEEDED
        attempt.provider_reference = result.payment_id
        attempt.save(update_fields=["status", "provider_reference", "updated_at"])

        customer = attempt.customer or {}
        order = create_order(
            lines=attempt.lines,
            email=customer.get("email", ""),
            customer_name=customer.get("name", ""),
            phone=customer.get("phone", ""),
            currency=attempt.currency,
            totals=attempt.totals,
            payment_method=attempt.method,
            payment_reference=result.payment_id,
            shipping_address=customer.get("shipping_address"),
            billing_address=customer.get("billing_address"),
        )
        clear_cart_instance(cart=Cart.objects.select_for_update().get(id=session.cart_id))

        session.state = CheckoutSession.STATE_SUCCEEDED
        session.order = order
        session.last_error = ""
        session.confirmation = {
            "order_id": order.number,
            "total": str(order.total),
            "email": order.email,
            "payment_id": result.payment_id,
            "payment_method": attempt.method,
        }
        session.save(update_fields=["state", "order", "last_error", "confirmation", "updated_at"])

    logger.info(
        "checkout.payment_succeeded",
        extra={
            "event": "checkout.payment_succeeded",
            "checkout": str(session.key),
            "attempt": attempt.reference,
            "method": attempt.method,
            "order": order.number,
            "total": str(order.total),
        },
    )
    notify_order_placed(order)
    return {
        "key": str(session.key),
        "state": session.state,
        "confirmation": session.confirmation,
        "payment": result.as_dict(),
    }, 201


def expire_stale_sessions(*, now=None) -> int:
    """Delete expired sessions that never succeeded; returns how many were removed."""

    now = now or timezone.now()
    qs = CheckoutSession.objects.filter(expires_at__lt=now).exclude(state=CheckoutSession.STATE_SUCCEEDED)
    count = qs.count()
    qs.delete()
    return count
