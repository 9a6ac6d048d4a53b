# shipping/services/heavy_order_service.py

"""
HEAVY (B2B) ORDER SERVICE

Steps:
1) create_heavy_order: draft with the 50% advance / 50% COD split
2) record_advance_payment: advance captured online (payments app)
3) create_at_aggregator: COD order, collectable = COD amount, one box per product line
4) list_rates -> manifest(courier) -> fetch_document / track
5) cancel: cancels the AWB at the aggregator when one exists
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from shipping.models import HeavyOrder
from shipping.services import bigship
from shipping.services.estimator import (
    PAYMENT_COD,
    RISK_OWNER,
    SHIPMENT_B2B,
    normalize_category,
)
from shipping.services.exceptions import HeavyOrderError, HeavyOrderNotFound
from shipping.services.heavy_order_lifecycle import validate_transition

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
HEAVY_ORDER_ADVANCE_RATIO = Decimal("0.5")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_split(total) -> tuple:
    """(advance, cod); advance is half the total, COD is the rest."""
    total = _money(total)
    advance = _money(total * HEAVY_ORDER_ADVANCE_RATIO)
    return advance, total - advance


# ============================================================
# READS
# ============================================================


def list_user_heavy_orders(user):
    return HeavyOrder.objects.filter(user=user).order_by("-created_at")


def get_heavy_order(*, user, heavy_order_id) -> HeavyOrder:
    heavy_order = HeavyOrder.objects.filter(id=heavy_order_id, user=user).first()
    if heavy_order is None:
        raise HeavyOrderNotFound("Heavy order not found")
    return heavy_order


# ============================================================
# DRAFT + ADVANCE
# ============================================================


def create_heavy_order(*, user, data: dict) -> HeavyOrder:
    advance, cod = compute_split(data["total_amount"])

    heavy_order = HeavyOrder(
        user=user,
        advance_amount=advance,
        cod_amount=cod,
        **{k: v for k, v in data.items() if k != "total_amount"},
        total_amount=_money(data["total_amount"]),
    )
    heavy_order.save()

    logger.info(
        "Heavy order drafted",
        extra={"heavy_order_id": str(heavy_order.id), "invoice_id": heavy_order.invoice_id},
    )
    return heavy_order


def _set_status(heavy_order: HeavyOrder, target: str, extra_fields=()):
    validate_transition(heavy_order=heavy_order, target_status=target)
    heavy_order.status = target
    heavy_order.save(update_fields=["status", "updated_at", *extra_fields])
    return heavy_order


@transaction.atomic
def record_advance_payment(heavy_order: HeavyOrder) -> HeavyOrder:
    heavy_order = HeavyOrder.objects.select_for_update().get(id=heavy_order.id)
    if heavy_order.status == HeavyOrder.STATUS_ADVANCE_PAID:
        return heavy_order
    return _set_status(heavy_order, HeavyOrder.STATUS_ADVANCE_PAID)


# ============================================================
# AGGREGATOR
# ============================================================


def build_heavy_order_payload(heavy_order: HeavyOrder) -> dict:
    box_details = []
    for line in heavy_order.products:
        quantity = int(line.get("quantity") or 1)
        box_details.append(
            {
                "each_box_dead_weight": float(line.get("weight") or 0),
                "each_box_length": float(line.get("length") or 0),
                "each_box_width": float(line.get("width") or 0),
                "each_box_height": float(line.get("height") or 0),
                "box_count": quantity,
                "product_details": [
                    {
                        "product_category": normalize_category(line.get("category")),
                        "product_name": line.get("name") or "",
                        "product_quantity": quantity,
                    }
                ],
            }
        )

    document_detail = {"invoice_document_file": heavy_order.invoice_document_file}
    if heavy_order.ewaybill_document_file:
        document_detail["ewaybill_document_file"] = heavy_order.ewaybill_document_file

    order_detail = {
        "invoice_date": timezone.now().isoformat(),
        "invoice_id": heavy_order.invoice_id,
        "payment_type": PAYMENT_COD,
        "shipment_invoice_amount": float(heavy_order.total_amount),
        "total_collectable_amount": float(heavy_order.cod_amount),
        "box_details": box_details,
        "document_detail": document_detail,
    }
    if heavy_order.ewaybill_number:
        order_detail["ewaybill_number"] = heavy_order.ewaybill_number

    return {
        "shipment_category": SHIPMENT_B2B,
        "warehouse_detail": {
            "pickup_location_id": heavy_order.warehouse_id,
            "return_location_id": heavy_order.warehouse_id,
        },
        "consignee_detail": {
            "first_name": heavy_order.first_name,
            "last_name": heavy_order.last_name,
            "company_name": heavy_order.company_name,
            "contact_number_primary": heavy_order.phone,
            "email_id": heavy_order.email,
            "consignee_address": {
                "address_line1": heavy_order.address_line1,
                "address_line2": heavy_order.address_line2,
                "address_landmark": heavy_order.landmark,
                "pincode": heavy_order.pincode,
            },
        },
        "order_detail": order_detail,
    }


@transaction.atomic
def create_at_aggregator(heavy_order: HeavyOrder) -> HeavyOrder:
    heavy_order = HeavyOrder.objects.select_for_update().get(id=heavy_order.id)
    validate_transition(heavy_order=heavy_order, target_status=HeavyOrder.STATUS_CREATED)

    message = bigship.add_heavy_order(build_heavy_order_payload(heavy_order))
    system_order_id = bigship.parse_system_order_id(message)
    if system_order_id is None:
        raise HeavyOrderError(f"Order created but could not extract order ID from: {message!r}")

    heavy_order.system_order_id = system_order_id
    _set_status(heavy_order, HeavyOrder.STATUS_CREATED, extra_fields=("system_order_id",))

    logger.info(
        "Heavy order created at aggregator",
        extra={"heavy_order_id": str(heavy_order.id), "system_order_id": system_order_id},
    )
    return heavy_order


def _require_system_order_id(heavy_order: HeavyOrder) -> int:
    if not heavy_order.system_order_id:
        raise HeavyOrderError("Heavy order has not been created at the aggregator yet")
    return heavy_order.system_order_id


def list_rates(heavy_order: HeavyOrder) -> list:
    return bigship.get_shipping_rates(
        SHIPMENT_B2B,
        _require_system_order_id(heavy_order),
        RISK_OWNER,
    )


@transaction.atomic
def manifest(heavy_order: HeavyOrder, courier_id: int) -> HeavyOrder:
    heavy_order = HeavyOrder.objects.select_for_update().get(id=heavy_order.id)
    system_order_id = _require_system_order_id(heavy_order)
    validate_transition(heavy_order=heavy_order, target_status=HeavyOrder.STATUS_MANIFESTED)

    bigship.manifest_heavy_order(system_order_id, courier_id, RISK_OWNER)

    heavy_order.courier_id = int(courier_id)
    return _set_status(heavy_order, HeavyOrder.STATUS_MANIFESTED, extra_fields=("courier_id",))


def fetch_document(heavy_order: HeavyOrder, shipment_data_id: int):
    """AWB (1), label (2) or manifest (3); the AWB number is stored when returned."""
    data = bigship.get_shipment_data(shipment_data_id, _require_system_order_id(heavy_order))

    if shipment_data_id == bigship.SHIPMENT_DATA_AWB and isinstance(data, dict):
        awb = str(data.get("master_awb") or data.get("awb") or "").strip()
        if awb and awb != heavy_order.awb:
            heavy_order.awb = awb
            heavy_order.save(update_fields=["awb", "updated_at"])

    return data


def track(heavy_order: HeavyOrder) -> dict:
    if not heavy_order.awb:
        raise HeavyOrderError("No AWB assigned yet")
    return bigship.get_tracking("awb", heavy_order.awb)


@transaction.atomic
def cancel(heavy_order: HeavyOrder) -> HeavyOrder:
    heavy_order = HeavyOrder.objects.select_for_update().get(id=heavy_order.id)
    validate_transition(heavy_order=heavy_order, target_status=HeavyOrder.STATUS_CANCELLED)

    if heavy_order.awb:
        bigship.cancel_awbs([heavy_order.awb])

    return _set_status(heavy_order, HeavyOrder.STATUS_CANCELLED)
