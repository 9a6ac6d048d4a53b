# bidding/services/bid_service.py

"""
BIDDING SERVICE

Bids:
- only the product owner (or an admin) opens, edits or deletes a bid
- listing is newest first, filterable by seller and status

Offers:
- the bid must be open and its end time in the future
- 1 <= quantity <= product stock
- bid_count is incremented atomically (F-expression)
- offers become accepted through the payment flow, rejected when a
  bid order is cancelled, or by the seller directly
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from bidding.models import Bid, BidOffer
from bidding.services.exceptions import (
    BidClosedError,
    BidNotFound,
    BidPermissionError,
    InvalidOfferError,
)
from products.models import Product

logger = logging.getLogger(__name__)

RECOMMENDED_DISCOUNT = Decimal("0.9")
DEFAULT_POPULAR_LIMIT = 10

EDITABLE_FIELDS = {"base_price", "moq", "end_time", "status", "description"}


def _is_admin(user) -> bool:
    return getattr(user, "role", None) == "admin"


def _ensure_bid_seller(user, bid: Bid):
    if bid.seller_id != user.id and not _is_admin(user):
        raise BidPermissionError("Only the seller of this bid can manage it")


# ============================================================
# BIDS
# ============================================================


def create_bid(*, seller, product: Product, data: dict) -> Bid:
    if product.owner_id != seller.id and not _is_admin(seller):
        raise BidPermissionError("You can only open bids on your own products")

    bid = Bid(
        product=product,
        seller=seller,
        **{k: v for k, v in data.items() if k in EDITABLE_FIELDS},
    )
    bid.save()

    logger.info("Bid opened", extra={"bid_id": str(bid.id), "product_id": str(product.id)})
    return bid


def list_bids(*, seller_id=None, status: str | None = None):
    qs = Bid.objects.select_related("product", "seller")
    if seller_id:
        qs = qs.filter(seller_id=seller_id)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


def get_bid(bid_id) -> Bid:
    bid = Bid.objects.select_related("product", "seller").filter(id=bid_id).first()
    if bid is None:
        raise BidNotFound("Bid not found")
    return bid


def update_bid(*, user, bid: Bid, data: dict) -> Bid:
    _ensure_bid_seller(user, bid)

    for field, value in data.items():
        if field in EDITABLE_FIELDS:
            setattr(bid, field, value)
    bid.save()
    return bid


def delete_bid(*, user, bid: Bid) -> None:
    _ensure_bid_seller(user, bid)
    logger.info("Bid deleted", extra={"bid_id": str(bid.id)})
    bid.delete()


def expire_bids(now=None) -> int:
    """Open bids past their end time become expired. Returns how many changed."""
    now = now or timezone.now()
    count = Bid.objects.filter(status=Bid.STATUS_OPEN, end_time__lte=now).update(
        status=Bid.STATUS_EXPIRED,
        updated_at=now,
    )
    if count:
        logger.info("Bids expired", extra={"count": count})
    return count


# ============================================================
# OFFERS
# ============================================================


@transaction.atomic
def submit_offer(*, buyer, bid: Bid, bid_amount, quantity: int, message: str = "") -> BidOffer:
    bid = Bid.objects.select_for_update().select_related("product").get(id=bid.id)

    if bid.status != Bid.STATUS_OPEN or bid.end_time <= timezone.now():
        raise BidClosedError("This bid is no longer accepting offers")

    if bid.seller_id == buyer.id:
        raise InvalidOfferError("You cannot bid on your own listing")

    quantity = int(quantity)
    if quantity < 1:
        raise InvalidOfferError("Quantity must be at least 1")

    if quantity < int(bid.moq or 1):
        raise InvalidOfferError(f"Quantity must be at least the minimum order quantity ({bid.moq} units)")

    stock = int(bid.product.stock_quantity or 0)
    if quantity > stock:
        raise InvalidOfferError(f"Cannot bid for more than the available stock ({stock} units)")

    offer = BidOffer.objects.create(
        bid=bid,
        product=bid.product,
        buyer=buyer,
        seller_id=bid.seller_id,
        bid_amount=bid_amount,
        quantity=quantity,
        buyer_name=buyer.public_name,
        message=message or "",
    )

    Bid.objects.filter(id=bid.id).update(bid_count=F("bid_count") + 1)

    logger.info(
        "Bid offer submitted",
        extra={"bid_id": str(bid.id), "offer_id": str(offer.id), "quantity": quantity},
    )
    return offer


def get_offer(offer_id) -> BidOffer:
    offer = BidOffer.objects.select_related("bid", "product").filter(id=offer_id).first()
    if offer is None:
        raise BidNotFound("Bid offer not found")
    return offer


def offers_for_bid(bid: Bid):
    return BidOffer.objects.filter(bid=bid).order_by("-created_at")


def offers_by_buyer(buyer):
    return BidOffer.objects.filter(buyer=buyer).select_related("bid", "product").order_by("-created_at")


def update_offer_status(*, user, offer: BidOffer, status: str) -> BidOffer:
    _ensure_bid_seller(user, offer.bid)
    return set_offer_status(offer, status)


def set_offer_status(offer: BidOffer, status: str) -> BidOffer:
    """System transition (payment captured, order cancelled); no permission check."""
    if status not in dict(BidOffer.STATUS_CHOICES):
        raise InvalidOfferError(f"Unknown offer status: {status}")

    if offer.status != status:
        offer.status = status
        offer.save(update_fields=["status", "updated_at"])
        logger.info("Bid offer status changed", extra={"offer_id": str(offer.id), "status": status})
    return offer


# ============================================================
# RECOMMENDATIONS
# ============================================================


def recommended_bid_price(product) -> int:
    """
    Per-piece price for half the stock at 10% off, rounded to whole rupees.
    0 when stock or price is missing.
    """
    stock = int(getattr(product, "stock_quantity", 0) or 0)
    base = Decimal(str(getattr(product, "base_price", 0) or 0))
    if stock <= 0 or base <= 0:
        return 0

    half = math.ceil(stock / 2)
    discounted_total = half * base * RECOMMENDED_DISCOUNT
    return int((discounted_total / half).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def popular_for_bidding(limit: int = DEFAULT_POPULAR_LIMIT) -> list:
    products = Product.objects.filter(status=Product.STATUS_ACTIVE).order_by("-view_count", "-created_at")[:limit]
    return [(product, recommended_bid_price(product)) for product in products]
