"""
HEAVY ORDER LIFECYCLE RULES

Single source of truth for HeavyOrder status transitions.
No database writes, no side effects.
"""

from shipping.models import HeavyOrder
from shipping.services.exceptions import InvalidHeavyOrderTransition

TERMINAL_STATES = {
    HeavyOrder.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    HeavyOrder.STATUS_DRAFT: {
        HeavyOrder.STATUS_ADVANCE_PAID,
        HeavyOrder.STATUS_CANCELLED,
    },
    HeavyOrder.STATUS_ADVANCE_PAID: {
        HeavyOrder.STATUS_CREATED,
        HeavyOrder.STATUS_CANCELLED,
    },
    HeavyOrder.STATUS_CREATED: {
        HeavyOrder.STATUS_MANIFESTED,
        HeavyOrder.STATUS_CANCELLED,
    },
    HeavyOrder.STATUS_MANIFESTED: {
        HeavyOrder.STATUS_CANCELLED,
    },
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, heavy_order: HeavyOrder, target_status: str):
    if not can_transition(from_status=heavy_order.status, to_status=target_status):
        raise InvalidHeavyOrderTransition(
            f"Heavy order {heavy_order.invoice_id} cannot transition from "
            f"'{heavy_order.status}' to '{target_status}'"
        )
