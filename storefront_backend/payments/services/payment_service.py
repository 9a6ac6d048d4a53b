# payments/services/payment_service.py

"""
SPLIT PAYMENT SERVICE

Flow (cart and bid orders):
1) initialize_advance_payment   -> gateway order for ceil(total x ratio) rupees
2) confirm_advance_payment      -> order PROCESSING / PARTIAL, bid offer accepted,
                                   cart cleared (cart orders)
3) initialize_remaining_payment -> gateway order for the remainder (PARTIAL only)
4) confirm_remaining_payment    -> payment COMPLETED, remaining 0

Heavy orders pay the advance online; the rest is COD at delivery.

Idempotency:
- confirmations are keyed by the gateway payment id (Payment.payment_id unique)
- the webhook reconciles a capture the client never confirmed
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from bidding.models import BidOffer
from bidding.services import bid_service
from cart.services import cart_service
from orders.models import Order
from orders.services.order_lifecycle import validate_transition
from payments.models import Payment
from payments.services import razorpay
from payments.services.exceptions import (
    PaymentPermissionError,
    PaymentStateError,
    PaymentVerificationError,
)
from shipping.models import HeavyOrder
from shipping.services import heavy_order_service

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

EVENT_PAYMENT_CAPTURED = "payment.captured"


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def advance_ratio() -> Decimal:
    return Decimal(str(getattr(settings, "ADVANCE_PAYMENT_RATIO", "0.5") or "0.5"))


def compute_advance(total) -> Decimal:
    """Advance in whole rupees, rounded up."""
    return Decimal(math.ceil(Decimal(str(total)) * advance_ratio())).quantize(TWOPLACES)


def _currency() -> str:
    return getattr(settings, "PAYMENT_CURRENCY", "INR") or "INR"


def _ensure_owner(user, obj):
    if obj.user_id != user.id:
        raise PaymentPermissionError("You can only pay for your own orders")


# ============================================================
# CHECKOUT OPTIONS
# ============================================================


def _checkout_options(*, user, amount: Decimal, gateway_order: dict, description: str) -> dict:
    return {
        "key": razorpay.get_key_id(),
        "amount": razorpay.to_paise(amount),
        "currency": _currency(),
        "name": getattr(settings, "STORE_NAME", ""),
        "description": description,
        "order_id": gateway_order["id"],
        "prefill": {
            "email": user.email or "",
            "contact": getattr(user, "phone", "") or "",
            "name": getattr(user, "display_name", "") or "",
        },
    }


def _open_gateway_order(*, user, amount: Decimal, receipt: str, notes: dict, description: str) -> dict:
    gateway_order = razorpay.create_order(
        amount=amount,
        currency=_currency(),
        receipt=receipt,
        notes=notes,
    )
    logger.info(
        "Gateway order created",
        extra={"gateway_order_id": gateway_order["id"], "amount": str(amount), **notes},
    )
    return _checkout_options(user=user, amount=amount, gateway_order=gateway_order, description=description)


def _verify(payload: dict):
    order_id = str(payload.get("razorpay_order_id") or "").strip()
    payment_id = str(payload.get("razorpay_payment_id") or "").strip()
    signature = str(payload.get("razorpay_signature") or "").strip()

    if not razorpay.verify_payment_signature(order_id=order_id, payment_id=payment_id, signature=signature):
        raise PaymentVerificationError("Payment signature verification failed")
    return order_id, payment_id, signature


def _already_recorded(payment_id: str) -> bool:
    return Payment.objects.filter(payment_id=payment_id).exists()


# ============================================================
# ADVANCE (orders)
# ============================================================


def initialize_advance_payment(*, user, order: Order) -> dict:
    _ensure_owner(user, order)
    if order.status != Order.STATUS_PENDING or order.payment_status != Order.PAYMENT_PENDING:
        raise PaymentStateError("Advance payment is only possible for pending orders")

    amount = compute_advance(order.total_amount)
    return _open_gateway_order(
        user=user,
        amount=amount,
        receipt=order.order_no,
        notes={"order_id": str(order.id), "kind": Payment.KIND_ADVANCE},
        description=f"Advance payment for order {order.order_no}",
    )


@transaction.atomic
def _apply_advance(order: Order, *, payment_id: str, gateway_order_id: str, signature: str = "", payload=None) -> Order:
    order = Order.objects.select_for_update().get(pk=order.pk)

    if _already_recorded(payment_id):
        return order

    if order.payment_status != Order.PAYMENT_PENDING:
        raise PaymentStateError(f"Order payment is already {order.payment_status}")

    validate_transition(order=order, target_status=Order.STATUS_PROCESSING)

    amount = compute_advance(order.total_amount)
    Payment.objects.create(
        user_id=order.user_id,
        order=order,
        amount=amount,
        currency=_currency(),
        kind=Payment.KIND_ADVANCE,
        gateway_order_id=gateway_order_id,
        payment_id=payment_id,
        signature=signature,
        provider_payload=payload or {},
    )

    order.paid_amount = amount
    order.remaining_amount = _money(order.total_amount) - amount
    order.payment_status = Order.PAYMENT_PARTIAL
    order.status = Order.STATUS_PROCESSING
    order.payment_error = ""
    order.paid_at = timezone.now()
    order.save(
        update_fields=[
            "paid_amount",
            "remaining_amount",
            "payment_status",
            "status",
            "payment_error",
            "paid_at",
            "updated_at",
        ]
    )

    if order.is_bid_order and order.bid_offer_id:
        bid_service.set_offer_status(order.bid_offer, BidOffer.STATUS_ACCEPTED)
    else:
        cart = cart_service.get_or_create_cart(order.user)
        cart_service.clear_cart(cart)

    logger.info(
        "Advance payment captured",
        extra={"order_id": str(order.id), "payment_id": payment_id, "amount": str(amount)},
    )
    return order


def confirm_advance_payment(*, user, order: Order, payload: dict) -> Order:
    _ensure_owner(user, order)
    gateway_order_id, payment_id, signature = _verify(payload)
    return _apply_advance(
        order,
        payment_id=payment_id,
        gateway_order_id=gateway_order_id,
        signature=signature,
        payload=payload,
    )


@transaction.atomic
def fail_payment(*, user, order: Order, error: str = "") -> Order:
    """
    A failed first payment cancels the order. A failed remaining payment
    only records the error; the advance already paid keeps the order alive.
    """
    _ensure_owner(user, order)
    order = Order.objects.select_for_update().get(pk=order.pk)
    if order.payment_status not in (Order.PAYMENT_PENDING, Order.PAYMENT_PARTIAL):
        raise PaymentStateError(f"Order payment is already {order.payment_status}")

    message = (error or "Payment failed")[:255]

    fields = ["payment_error", "updated_at"]
    order.payment_error = message

    if order.payment_status == Order.PAYMENT_PENDING:
        validate_transition(order=order, target_status=Order.STATUS_CANCELLED)
        order.payment_status = Order.PAYMENT_FAILED
        order.status = Order.STATUS_CANCELLED
        fields += ["payment_status", "status"]

    order.save(update_fields=fields)

    kind = Payment.KIND_ADVANCE if order.payment_status == Order.PAYMENT_FAILED else Payment.KIND_REMAINING
    Payment.objects.create(
        user_id=order.user_id,
        order=order,
        amount=_expected_amount(order, kind),
        currency=_currency(),
        status=Payment.STATUS_FAILED,
        kind=kind,
        error_message=message,
    )

    logger.warning("Payment failed", extra={"order_id": str(order.id), "error": message})
    return order


# ============================================================
# REMAINING (orders)
# ============================================================


def initialize_remaining_payment(*, user, order: Order) -> dict:
    _ensure_owner(user, order)
    if order.payment_status != Order.PAYMENT_PARTIAL:
        raise PaymentStateError("Remaining payment is only possible after the advance")

    amount = _money(order.remaining_amount)
    return _open_gateway_order(
        user=user,
        amount=amount,
        receipt=f"{order.order_no}-R",
        notes={"order_id": str(order.id), "kind": Payment.KIND_REMAINING},
        description=f"Remaining payment for order {order.order_no}",
    )


@transaction.atomic
def _apply_remaining(order: Order, *, payment_id: str, gateway_order_id: str, signature: str = "", payload=None) -> Order:
    order = Order.objects.select_for_update().get(pk=order.pk)

    if _already_recorded(payment_id):
        return order

    if order.payment_status != Order.PAYMENT_PARTIAL:
        raise PaymentStateError(f"Order payment is {order.payment_status}; expected partial")

    amount = _money(order.remaining_amount)
    Payment.objects.create(
        user_id=order.user_id,
        order=order,
        amount=amount,
        currency=_currency(),
        kind=Payment.KIND_REMAINING,
        gateway_order_id=gateway_order_id,
        payment_id=payment_id,
        signature=signature,
        provider_payload=payload or {},
    )

    order.paid_amount = _money(order.total_amount)
    order.remaining_amount = Decimal("0.00")
    order.payment_status = Order.PAYMENT_COMPLETED
    order.payment_error = ""
    order.save(update_fields=["paid_amount", "remaining_amount", "payment_status", "payment_error", "updated_at"])

    logger.info(
        "Remaining payment captured",
        extra={"order_id": str(order.id), "payment_id": payment_id, "amount": str(amount)},
    )
    return order


def confirm_remaining_payment(*, user, order: Order, payload: dict) -> Order:
    _ensure_owner(user, order)
    gateway_order_id, payment_id, signature = _verify(payload)
    return _apply_remaining(
        order,
        payment_id=payment_id,
        gateway_order_id=gateway_order_id,
        signature=signature,
        payload=payload,
    )


# ============================================================
# HEAVY ORDER ADVANCE
# ============================================================


def initialize_heavy_order_advance(*, user, heavy_order: HeavyOrder) -> dict:
    _ensure_owner(user, heavy_order)
    if heavy_order.status != HeavyOrder.STATUS_DRAFT:
        raise PaymentStateError("Advance payment is only possible for draft heavy orders")

    amount = _money(heavy_order.advance_amount)
    return _open_gateway_order(
        user=user,
        amount=amount,
        receipt=heavy_order.invoice_id,
        notes={"heavy_order_id": str(heavy_order.id), "kind": Payment.KIND_ADVANCE},
        description=f"Advance for heavy order {heavy_order.invoice_id}",
    )


@transaction.atomic
def _apply_heavy_advance(
    heavy_order: HeavyOrder, *, payment_id: str, gateway_order_id: str, signature: str = "", payload=None
) -> HeavyOrder:
    heavy_order = HeavyOrder.objects.select_for_update().get(pk=heavy_order.pk)

    if _already_recorded(payment_id):
        return heavy_order

    if heavy_order.status != HeavyOrder.STATUS_DRAFT:
        raise PaymentStateError(f"Heavy order is already {heavy_order.status}")

    Payment.objects.create(
        user_id=heavy_order.user_id,
        heavy_order=heavy_order,
        amount=_money(heavy_order.advance_amount),
        currency=_currency(),
        kind=Payment.KIND_ADVANCE,
        gateway_order_id=gateway_order_id,
        payment_id=payment_id,
        signature=signature,
        provider_payload=payload or {},
    )
    return heavy_order_service.record_advance_payment(heavy_order)


def confirm_heavy_order_advance(*, user, heavy_order: HeavyOrder, payload: dict) -> HeavyOrder:
    _ensure_owner(user, heavy_order)
    gateway_order_id, payment_id, signature = _verify(payload)
    return _apply_heavy_advance(
        heavy_order,
        payment_id=payment_id,
        gateway_order_id=gateway_order_id,
        signature=signature,
        payload=payload,
    )


# ============================================================
# WEBHOOK RECONCILIATION
# ============================================================


def _expected_amount(target, kind: str) -> Decimal:
    if isinstance(target, HeavyOrder):
        return _money(target.advance_amount)
    if kind == Payment.KIND_REMAINING:
        return _money(target.remaining_amount)
    return compute_advance(target.total_amount)


def handle_webhook_event(event: dict) -> str:
    """
    Applies a signature-verified gateway event. Returns a short outcome
    string for logging; unknown or duplicate events are not errors.
    """
    if (event or {}).get("event") != EVENT_PAYMENT_CAPTURED:
        return "ignored"

    entity = (((event.get("payload") or {}).get("payment") or {}).get("entity")) or {}
    payment_id = str(entity.get("id") or "").strip()
    gateway_order_id = str(entity.get("order_id") or "").strip()
    notes = entity.get("notes") or {}
    kind = notes.get("kind") or Payment.KIND_ADVANCE

    if not payment_id:
        return "no_payment_id"
    if _already_recorded(payment_id):
        return "duplicate"

    target = None
    if notes.get("heavy_order_id"):
        target = HeavyOrder.objects.filter(id=notes["heavy_order_id"]).first()
    elif notes.get("order_id"):
        target = Order.objects.filter(id=notes["order_id"]).first()

    if target is None:
        logger.warning("Webhook for unknown order", extra={"payment_id": payment_id})
        return "unknown_order"

    verified = razorpay.fetch_payment(payment_id)
    if str(verified.get("status") or "").lower() != "captured":
        logger.warning("Webhook payment not captured at gateway", extra={"payment_id": payment_id})
        return "not_captured"

    paid = _money(Decimal(int(verified.get("amount") or 0)) / Decimal("100"))
    expected = _expected_amount(target, kind)
    if paid != expected:
        logger.error(
            "Payment amount mismatch",
            extra={"payment_id": payment_id, "paid": str(paid), "expected": str(expected)},
        )
        raise PaymentVerificationError("Captured amount does not match the expected amount")

    apply_kwargs = {"payment_id": payment_id, "gateway_order_id": gateway_order_id, "payload": event}
    if isinstance(target, HeavyOrder):
        _apply_heavy_advance(target, **apply_kwargs)
    elif kind == Payment.KIND_REMAINING:
        _apply_remaining(target, **apply_kwargs)
    else:
        _apply_advance(target, **apply_kwargs)

    return "processed"
