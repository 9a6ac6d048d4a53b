# cart/services/cart_service.py

"""
CART SERVICE

Server-side replacement for the app's cart provider.

Rules:
- add_item increments quantity when the product is already present
- update_quantity(<= 0) removes the item
- clear_cart empties items AND resets the shipping state
- any change to contents drops the selected shipping quote
  (the quote depends on weight/volume/invoice value)
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal

from django.db import transaction

from cart.models import Cart, CartItem
from cart.services.exceptions import (
    InvalidPincodeError,
    ProductUnavailableError,
    ShippingSelectionError,
)

logger = logging.getLogger(__name__)

PINCODE_RE = re.compile(r"^\d{6}$")
TWOPLACES = Decimal("0.01")


def get_or_create_cart(user) -> Cart:
    cart, _ = Cart.objects.get_or_create(user=user)
    return cart


def cart_items(cart: Cart):
    return cart.items.select_related("product").order_by("created_at")


# ============================================================
# SHIPPING STATE
# ============================================================


def reset_shipping_selection(cart: Cart, *, drop_quotes: bool = True) -> Cart:
    cart.courier_id = None
    cart.courier_name = ""
    cart.shipping_cost = Decimal("0.00")
    cart.delivery_tat_days = None
    fields = ["courier_id", "courier_name", "shipping_cost", "delivery_tat_days", "updated_at"]

    if drop_quotes:
        cart.shipping_quotes = []
        fields.append("shipping_quotes")

    cart.save(update_fields=fields)
    return cart


def set_shipping_pincode(cart: Cart, pincode: str) -> Cart:
    pincode = str(pincode or "").strip()
    if not PINCODE_RE.match(pincode):
        raise InvalidPincodeError("Enter a valid 6-digit pincode")

    cart.shipping_pincode = pincode
    cart.save(update_fields=["shipping_pincode", "updated_at"])
    return reset_shipping_selection(cart)


def apply_shipping_selection(
    cart: Cart,
    *,
    courier_id: int,
    courier_name: str,
    shipping_cost,
    tat_days=None,
) -> Cart:
    cost = Decimal(str(shipping_cost)).quantize(TWOPLACES)
    if cost < 0:
        raise ShippingSelectionError("Shipping cost cannot be negative")

    cart.courier_id = int(courier_id)
    cart.courier_name = courier_name or ""
    cart.shipping_cost = cost
    cart.delivery_tat_days = int(tat_days) if tat_days is not None else None
    cart.save(
        update_fields=[
            "courier_id",
            "courier_name",
            "shipping_cost",
            "delivery_tat_days",
            "updated_at",
        ]
    )

    logger.info(
        "Shipping selected",
        extra={"cart_id": str(cart.id), "courier_id": cart.courier_id, "shipping_cost": str(cost)},
    )
    return cart


# ============================================================
# CONTENTS
# ============================================================


@transaction.atomic
def add_item(cart: Cart, product, quantity: int = 1) -> CartItem:
    quantity = int(quantity)
    if quantity <= 0:
        raise ValueError("Quantity must be greater than zero")

    if product.status != product.STATUS_ACTIVE:
        raise ProductUnavailableError(f"{product.name} is not available")

    item = CartItem.objects.select_for_update().filter(cart=cart, product=product).first()
    if item is None:
        item = CartItem.objects.create(cart=cart, product=product, quantity=quantity)
    else:
        item.quantity = int(item.quantity) + quantity
        item.save(update_fields=["quantity", "updated_at"])

    reset_shipping_selection(cart)
    return item


@transaction.atomic
def remove_item(cart: Cart, product_id) -> bool:
    deleted, _ = CartItem.objects.filter(cart=cart, product_id=product_id).delete()
    if deleted:
        reset_shipping_selection(cart)
    return bool(deleted)


@transaction.atomic
def update_quantity(cart: Cart, product_id, quantity: int):
    """Sets the quantity; zero or negative removes the item. Returns the item or None."""
    quantity = int(quantity)
    if quantity <= 0:
        remove_item(cart, product_id)
        return None

    item = CartItem.objects.select_for_update().filter(cart=cart, product_id=product_id).first()
    if item is None:
        return None

    if item.quantity != quantity:
        item.quantity = quantity
        item.save(update_fields=["quantity", "updated_at"])
        reset_shipping_selection(cart)

    return item


@transaction.atomic
def clear_cart(cart: Cart) -> Cart:
    cart.items.all().delete()
    cart.shipping_pincode = ""
    cart.save(update_fields=["shipping_pincode", "updated_at"])
    return reset_shipping_selection(cart)


# ============================================================
# TOTALS (live prices)
# ============================================================


def item_count(cart: Cart) -> int:
    return sum(int(item.quantity) for item in cart_items(cart))


def cart_total(cart: Cart) -> Decimal:
    total = Decimal("0.00")
    for item in cart_items(cart):
        total += item.line_total
    return total.quantize(TWOPLACES)


def grand_total(cart: Cart) -> Decimal:
    """Items plus the selected shipping cost."""
    return (cart_total(cart) + Decimal(cart.shipping_cost or 0)).quantize(TWOPLACES)
