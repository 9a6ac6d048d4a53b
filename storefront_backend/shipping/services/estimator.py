# shipping/services/estimator.py

"""
PARCEL ESTIMATOR (pure functions, no I/O)

Turns cart lines into the single-box request the rate aggregator expects.

Rules:
- per-item defaults when the product has no data:
  weight 0.5 kg, length / width / height 10 cm
- total weight = sum(weight * qty); total volume = sum(l * w * h * qty)
- the box starts at the largest item's dimensions; when the total volume
  exceeds that box, every side is scaled by cbrt(total / box) and rounded up
- floors: weight >= 0.5 kg, each side >= 10 cm
- the cheapest rate is the lowest total_shipping_charges (first wins ties)
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from shipping.services.exceptions import InvalidPincodeError

DEFAULT_WEIGHT_KG = 0.5
DEFAULT_SIDE_CM = 10.0
MIN_WEIGHT_KG = 0.5
MIN_SIDE_CM = 10.0
DEFAULT_TAT_DAYS = 3
DELIVERY_WINDOW_SPREAD_DAYS = 2

SHIPMENT_B2C = "b2c"
SHIPMENT_B2B = "b2b"

PAYMENT_COD = "COD"
PAYMENT_PREPAID = "Prepaid"

RISK_OWNER = "OwnerRisk"

# Categories the aggregator accepts; anything else ships as "Others".
PRODUCT_CATEGORIES = (
    "Accessories",
    "FashionClothing",
    "BookStationary",
    "Electronics",
    "FMCG",
    "Footwear",
    "Toys",
    "SportsEquipment",
    "Others",
    "Wellness",
    "Medicines",
)
DEFAULT_CATEGORY = "Others"
PLACEHOLDER_PRODUCT_NAME = "Sample Product"

PINCODE_RE = re.compile(r"^\d{6}$")
TWOPLACES = Decimal("0.01")


# ============================================================
# VALUE TYPES
# ============================================================


def _positive_or_default(value, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def normalize_category(raw: str | None) -> str:
    value = (raw or "").strip().lower()
    for category in PRODUCT_CATEGORIES:
        if category.lower() == value:
            return category
    return DEFAULT_CATEGORY


@dataclass(frozen=True)
class ParcelItem:
    name: str
    quantity: int
    unit_price: Decimal
    weight_kg: float = DEFAULT_WEIGHT_KG
    length_cm: float = DEFAULT_SIDE_CM
    width_cm: float = DEFAULT_SIDE_CM
    height_cm: float = DEFAULT_SIDE_CM
    category: str = DEFAULT_CATEGORY

    @classmethod
    def from_product(cls, product, quantity: int) -> "ParcelItem":
        return cls(
            name=product.name,
            quantity=int(quantity),
            unit_price=product.effective_price,
            weight_kg=_positive_or_default(product.weight_kg, DEFAULT_WEIGHT_KG),
            length_cm=_positive_or_default(product.length_cm, DEFAULT_SIDE_CM),
            width_cm=_positive_or_default(product.width_cm, DEFAULT_SIDE_CM),
            height_cm=_positive_or_default(product.height_cm, DEFAULT_SIDE_CM),
            category=normalize_category(product.category or product.category_name),
        )


@dataclass(frozen=True)
class Dimensions:
    total_weight: float
    total_volume: float
    max_length: float
    max_width: float
    max_height: float


@dataclass(frozen=True)
class Box:
    weight_kg: float
    length_cm: int
    width_cm: int
    height_cm: int

    def as_dict(self) -> dict:
        return {
            "weight_kg": self.weight_kg,
            "length_cm": self.length_cm,
            "width_cm": self.width_cm,
            "height_cm": self.height_cm,
        }


DEFAULT_BOX = Box(
    weight_kg=MIN_WEIGHT_KG,
    length_cm=int(MIN_SIDE_CM),
    width_cm=int(MIN_SIDE_CM),
    height_cm=int(MIN_SIDE_CM),
)


# ============================================================
# AGGREGATION
# ============================================================


def aggregate_dimensions(items: Iterable[ParcelItem]) -> Dimensions:
    total_weight = 0.0
    total_volume = 0.0
    max_length = max_width = max_height = 0.0

    for item in items:
        qty = int(item.quantity)
        total_weight += item.weight_kg * qty
        total_volume += item.length_cm * item.width_cm * item.height_cm * qty
        max_length = max(max_length, item.length_cm)
        max_width = max(max_width, item.width_cm)
        max_height = max(max_height, item.height_cm)

    return Dimensions(
        total_weight=total_weight,
        total_volume=total_volume,
        max_length=max_length,
        max_width=max_width,
        max_height=max_height,
    )


def _scaled_side(side: float, factor: float) -> int:
    # round() first so float noise (e.g. 30.000000000000004) does not bump a whole cm
    return math.ceil(round(side * factor, 6))


def estimate_box(dimensions: Dimensions) -> Box:
    length = dimensions.max_length
    width = dimensions.max_width
    height = dimensions.max_height

    if length <= 0 or width <= 0 or height <= 0:
        return DEFAULT_BOX

    box_volume = length * width * height
    if dimensions.total_volume > box_volume:
        factor = math.cbrt(dimensions.total_volume / box_volume)
        length = _scaled_side(length, factor)
        width = _scaled_side(width, factor)
        height = _scaled_side(height, factor)

    return Box(
        weight_kg=round(max(MIN_WEIGHT_KG, dimensions.total_weight), 3),
        length_cm=math.ceil(max(MIN_SIDE_CM, length)),
        width_cm=math.ceil(max(MIN_SIDE_CM, width)),
        height_cm=math.ceil(max(MIN_SIDE_CM, height)),
    )


def invoice_amount(items: Iterable[ParcelItem]) -> Decimal:
    total = Decimal("0.00")
    for item in items:
        total += Decimal(item.unit_price) * Decimal(int(item.quantity))
    return total.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


# ============================================================
# REQUEST BUILDING
# ============================================================


def validate_pincode(value) -> str:
    pincode = str(value or "").strip()
    if not PINCODE_RE.match(pincode):
        raise InvalidPincodeError(f"Invalid pincode: {value!r} (expected 6 digits)")
    return pincode


def placeholder_product_details() -> list:
    return [
        {
            "product_category": DEFAULT_CATEGORY,
            "product_name": PLACEHOLDER_PRODUCT_NAME,
            "product_quantity": 1,
        }
    ]


def ensure_product_details(box_details: list) -> list:
    """Every box sent to the calculator must carry at least one product line."""
    safe = []
    for box in box_details or []:
        box = dict(box)
        if not box.get("product_details"):
            box["product_details"] = placeholder_product_details()
        safe.append(box)
    return safe


def build_rate_request(
    items: list,
    *,
    pickup_pincode,
    destination_pincode,
    b2b: bool = False,
    payment_method: str = "prepaid",
    box: Optional[Box] = None,
) -> dict:
    pickup = validate_pincode(pickup_pincode)
    destination = validate_pincode(destination_pincode)

    if box is None:
        box = estimate_box(aggregate_dimensions(items)) if items else DEFAULT_BOX

    product_details = [
        {
            "product_category": item.category or DEFAULT_CATEGORY,
            "product_name": item.name,
            "product_quantity": int(item.quantity),
        }
        for item in items
    ]

    payload = {
        "shipment_category": SHIPMENT_B2B if b2b else SHIPMENT_B2C,
        "payment_type": PAYMENT_COD if (payment_method or "").lower() == "cod" else PAYMENT_PREPAID,
        "pickup_pincode": int(pickup),
        "destination_pincode": int(destination),
        "shipment_invoice_amount": float(invoice_amount(items)),
        "box_details": [
            {
                "each_box_dead_weight": box.weight_kg,
                "each_box_length": box.length_cm,
                "each_box_width": box.width_cm,
                "each_box_height": box.height_cm,
                "box_count": 1,
                "product_details": product_details or placeholder_product_details(),
            }
        ],
    }

    if b2b:
        payload["risk_type"] = RISK_OWNER

    return payload


# ============================================================
# RATE SELECTION
# ============================================================


def _charges(rate: dict) -> Decimal:
    try:
        return Decimal(str(rate.get("total_shipping_charges")))
    except (ArithmeticError, ValueError, TypeError):
        return Decimal("Infinity")


def sort_rates(rates: Iterable[dict]) -> list:
    return sorted(rates or [], key=_charges)


def select_cheapest(rates: Iterable[dict]) -> Optional[dict]:
    rates = list(rates or [])
    if not rates:
        return None
    return min(rates, key=_charges)


def delivery_window(rate: dict) -> tuple:
    try:
        tat = int(rate.get("tat") or DEFAULT_TAT_DAYS)
    except (TypeError, ValueError):
        tat = DEFAULT_TAT_DAYS
    return tat, tat + DELIVERY_WINDOW_SPREAD_DAYS
