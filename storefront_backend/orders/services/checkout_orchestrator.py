# orders/services/checkout_orchestrator.py

"""
CHECKOUT ORCHESTRATOR (APPLICATION SERVICE)

Purpose:
- Turn the buyer's cart (or an accepted-price bid offer) into a PENDING order.
- Snapshot every line (name, unit price, quantity) so later catalog edits
  never change a placed order.
- Owner cancellation and seller/admin fulfilment transitions.

Hard rules:
- Money values are computed server-side; the client never sends totals.
- Cart orders: total = items (live effective price) + selected shipping cost.
- Bid orders: total = bid amount x quantity, unit price = bid amount.
- The cart is NOT cleared here; it is cleared once the advance is captured.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from bidding.models import BidOffer
from bidding.services import bid_service
from cart.services import cart_service
from orders.models import Order, OrderItem
from orders.services.exceptions import (
    CheckoutError,
    EmptyCartError,
    OrderNotFound,
    OrderNotPaidError,
    OrderPermissionError,
)
from orders.services.order_lifecycle import CANCELLABLE_STATES, validate_transition

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def clean_address(address) -> dict:
    """Drops empty (None) fields; the rest is stored as given."""
    if not address:
        return {}
    return {key: value for key, value in dict(address).items() if value is not None}


def _is_admin(user) -> bool:
    return getattr(user, "role", None) == "admin"


# ============================================================
# READS
# ============================================================


def get_user_orders(user):
    return Order.objects.filter(user=user).prefetch_related("items").order_by("-created_at")


def get_seller_orders(user):
    """Orders containing at least one line sold by this seller."""
    return (
        Order.objects.filter(items__seller=user)
        .distinct()
        .prefetch_related("items")
        .order_by("-created_at")
    )


def get_order(*, user, order_id) -> Order:
    order = Order.objects.prefetch_related("items").filter(id=order_id).first()
    if order is None or (order.user_id != user.id and not _is_admin(user)):
        raise OrderNotFound("Order not found")
    return order


# ============================================================
# CREATE
# ============================================================


@transaction.atomic
def create_order_from_cart(*, user, cart, shipping_address=None) -> Order:
    cart = cart.__class__.objects.select_for_update().get(pk=cart.pk)
    if cart.user_id != user.id:
        raise OrderPermissionError("You can only check out your own cart")

    items = list(cart_service.cart_items(cart))
    if not items:
        raise EmptyCartError("Cart is empty")

    for item in items:
        if item.product.status != item.product.STATUS_ACTIVE:
            raise CheckoutError(f"{item.product.name} is no longer available")

    items_total = _money(sum((item.line_total for item in items), Decimal("0.00")))
    shipping_cost = _money(cart.shipping_cost)
    total = items_total + shipping_cost

    order = Order.objects.create(
        user=user,
        items_total=items_total,
        shipping_cost=shipping_cost,
        total_amount=total,
        paid_amount=Decimal("0.00"),
        remaining_amount=total,
        shipping_address=clean_address(shipping_address),
        courier_id=cart.courier_id,
        courier_name=cart.courier_name,
    )

    for item in items:
        OrderItem.objects.create(
            order=order,
            product=item.product,
            seller_id=item.product.owner_id,
            product_name=item.product.name,
            featured_image=item.product.featured_image or "",
            quantity=item.quantity,
            unit_price=_money(item.unit_price),
        )

    logger.info(
        "Order created from cart",
        extra={"order_id": str(order.id), "user_id": str(user.id), "total": str(total)},
    )
    return order


@transaction.atomic
def create_bid_order(*, user, offer: BidOffer, shipping_address=None) -> Order:
    offer = BidOffer.objects.select_for_update().select_related("product", "bid").get(pk=offer.pk)

    if offer.buyer_id != user.id:
        raise OrderPermissionError("Only the buyer who made this offer can order it")

    if offer.status != BidOffer.STATUS_PENDING:
        raise CheckoutError(f"Bid offer is {offer.status}; only pending offers can be ordered")

    open_order = (
        Order.objects.filter(bid_offer=offer)
        .exclude(status=Order.STATUS_CANCELLED)
        .first()
    )
    if open_order is not None:
        raise CheckoutError(f"Bid offer already has order {open_order.order_no}")

    unit_price = _money(offer.bid_amount)
    total = _money(unit_price * int(offer.quantity))

    order = Order.objects.create(
        user=user,
        items_total=total,
        total_amount=total,
        paid_amount=Decimal("0.00"),
        remaining_amount=total,
        shipping_address=clean_address(shipping_address),
        is_bid_order=True,
        bid=offer.bid,
        bid_offer=offer,
    )

    OrderItem.objects.create(
        order=order,
        product=offer.product,
        seller_id=offer.seller_id,
        product_name=offer.product.name,
        featured_image=offer.product.featured_image or "",
        quantity=offer.quantity,
        unit_price=unit_price,
    )

    logger.info(
        "Bid order created",
        extra={"order_id": str(order.id), "offer_id": str(offer.id), "total": str(total)},
    )
    return order


# ============================================================
# CANCEL / FULFIL
# ============================================================


@transaction.atomic
def cancel_order(*, user, order: Order) -> Order:
    order = Order.objects.select_for_update().get(pk=order.pk)

    if order.user_id != user.id and not _is_admin(user):
        raise OrderPermissionError("You can only cancel your own orders")

    if order.status not in CANCELLABLE_STATES:
        raise CheckoutError(f"Order cannot be cancelled in '{order.status}' status")

    validate_transition(order=order, target_status=Order.STATUS_CANCELLED)
    order.status = Order.STATUS_CANCELLED
    order.save(update_fields=["status", "updated_at"])

    if order.is_bid_order and order.bid_offer_id:
        bid_service.set_offer_status(order.bid_offer, BidOffer.STATUS_REJECTED)

    logger.info("Order cancelled", extra={"order_id": str(order.id), "user_id": str(user.id)})
    return order


def _can_fulfil(user, order: Order) -> bool:
    if _is_admin(user):
        return True
    return order.items.filter(seller=user).exists()


@transaction.atomic
def advance_order_status(
    *,
    user,
    order: Order,
    target_status: str,
    tracking_id: str | None = None,
    estimated_delivery=None,
) -> Order:
    order = Order.objects.select_for_update().get(pk=order.pk)

    if not _can_fulfil(user, order):
        raise OrderPermissionError("Only the seller of this order or an admin can update it")

    validate_transition(order=order, target_status=target_status)

    # pending -> processing belongs to the advance payment capture
    if order.payment_status == Order.PAYMENT_PENDING and target_status != Order.STATUS_CANCELLED:
        raise OrderNotPaidError("The advance payment for this order has not been received")

    tracking_id = (tracking_id or "").strip()
    if target_status == Order.STATUS_IN_TRANSIT and not (tracking_id or order.tracking_id):
        raise CheckoutError("A tracking id is required to mark an order in transit")

    fields = ["status", "updated_at"]
    order.status = target_status

    if tracking_id:
        order.tracking_id = tracking_id
        fields.append("tracking_id")
    if estimated_delivery is not None:
        order.estimated_delivery = estimated_delivery
        fields.append("estimated_delivery")
    if target_status == Order.STATUS_DELIVERED:
        order.delivered_at = timezone.now()
        fields.append("delivered_at")

    order.save(update_fields=fields)

    logger.info(
        "Order status advanced",
        extra={"order_id": str(order.id), "status": target_status, "by": str(user.id)},
    )
    return order
