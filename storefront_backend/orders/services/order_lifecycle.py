"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from orders.models import Order
from orders.services.exceptions import InvalidOrderTransitionError

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_PROCESSING,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PROCESSING: {
        Order.STATUS_IN_TRANSIT,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_IN_TRANSIT: {
        Order.STATUS_DELIVERED,
    },
}

CANCELLABLE_STATES = {
    Order.STATUS_PENDING,
    Order.STATUS_PROCESSING,
}


# ============================================================
# TRANSITION CHECKS
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.order_no} cannot transition from '{order.status}' to '{target_status}'"
        )
