# shipping/services/rate_service.py

"""
CART SHIPPING QUOTES

Flow:
1) cart lines -> ParcelItems (estimator defaults for missing product data)
2) single-box rate request -> aggregator calculator
3) rates sorted cheapest first and stored on the cart
4) cheapest rate auto-selected (buyer may pick another quoted courier)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.db import transaction

from cart.services import cart_service
from shipping.services import bigship
from shipping.services.estimator import (
    Box,
    ParcelItem,
    aggregate_dimensions,
    build_rate_request,
    delivery_window,
    estimate_box,
    select_cheapest,
    sort_rates,
    validate_pincode,
)
from shipping.services.exceptions import (
    EmptyShipmentError,
    NoRatesAvailable,
    ShippingConfigError,
    ShippingSelectionError,
)

logger = logging.getLogger(__name__)

# Keys kept on the cart; the aggregator sends more (breakdowns) than the UI needs.
QUOTE_FIELDS = (
    "courier_id",
    "courier_name",
    "courier_type",
    "zone",
    "tat",
    "billable_weight",
    "total_shipping_charges",
)


@dataclass(frozen=True)
class CartQuote:
    box: Box
    rates: list
    selected: dict


def default_pickup_pincode() -> str:
    shipping = getattr(settings, "SHIPPING", {}) or {}
    pincode = (shipping.get("PICKUP_PINCODE") or "").strip()
    if not pincode:
        raise ShippingConfigError("SHIPPING_PICKUP_PINCODE is not configured")
    return pincode


def parcel_items_for_cart(cart) -> list:
    return [ParcelItem.from_product(item.product, item.quantity) for item in cart_service.cart_items(cart)]


def _quote_summary(rate: dict) -> dict:
    summary = {key: rate.get(key) for key in QUOTE_FIELDS}
    earliest, latest = delivery_window(rate)
    summary["delivery_days_min"] = earliest
    summary["delivery_days_max"] = latest
    return summary


def quote_cart(
    cart,
    destination_pincode,
    pickup_pincode: Optional[str] = None,
    b2b: bool = False,
    payment_method: str = "prepaid",
) -> CartQuote:
    destination = validate_pincode(destination_pincode)
    pickup = validate_pincode(pickup_pincode or default_pickup_pincode())

    items = parcel_items_for_cart(cart)
    if not items:
        raise EmptyShipmentError("Add items to the cart before requesting shipping rates")

    box = estimate_box(aggregate_dimensions(items))
    payload = build_rate_request(
        items,
        pickup_pincode=pickup,
        destination_pincode=destination,
        b2b=b2b,
        payment_method=payment_method,
        box=box,
    )

    rates = sort_rates(bigship.calculate_rates(payload))
    cheapest = select_cheapest(rates)
    if cheapest is None:
        raise NoRatesAvailable("No shipping options available for this address")

    quotes = [_quote_summary(rate) for rate in rates]

    with transaction.atomic():
        cart.shipping_pincode = destination
        cart.shipping_quotes = quotes
        cart.save(update_fields=["shipping_pincode", "shipping_quotes", "updated_at"])
        _apply(cart, quotes[0])

    logger.info(
        "Cart shipping quoted",
        extra={
            "cart_id": str(cart.id),
            "destination": destination,
            "rate_count": len(quotes),
            "courier_id": cheapest.get("courier_id"),
        },
    )
    return CartQuote(box=box, rates=quotes, selected=quotes[0])


def _apply(cart, quote: dict):
    return cart_service.apply_shipping_selection(
        cart,
        courier_id=quote["courier_id"],
        courier_name=quote.get("courier_name") or "",
        shipping_cost=quote.get("total_shipping_charges") or 0,
        tat_days=quote.get("delivery_days_min"),
    )


def select_rate(cart, courier_id) -> dict:
    """Apply a courier the buyer picked from the cart's stored quotes."""
    for quote in cart.shipping_quotes or []:
        if str(quote.get("courier_id")) == str(courier_id):
            _apply(cart, quote)
            return quote

    raise ShippingSelectionError("Selected courier was not part of the latest quote; request rates again")


def quote_product(product, quantity: int, destination_pincode, pickup_pincode: Optional[str] = None) -> list:
    """Rates for a single product line; nothing is stored."""
    destination = validate_pincode(destination_pincode)
    pickup = validate_pincode(pickup_pincode or default_pickup_pincode())

    items = [ParcelItem.from_product(product, quantity)]
    payload = build_rate_request(items, pickup_pincode=pickup, destination_pincode=destination)

    rates = sort_rates(bigship.calculate_rates(payload))
    if not rates:
        raise NoRatesAvailable("No shipping options available for this address")

    return [_quote_summary(rate) for rate in rates]
