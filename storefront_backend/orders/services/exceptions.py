# orders/services/exceptions.py

"""
ORDER SERVICE ERRORS
"""


class OrderError(Exception):
    """Base exception for order creation and fulfilment."""


class CheckoutError(OrderError):
    pass


class EmptyCartError(CheckoutError):
    pass


class OrderNotFound(OrderError):
    pass


class OrderPermissionError(OrderError):
    pass


class OrderLifecycleError(OrderError):
    pass


class InvalidOrderTransitionError(OrderLifecycleError):
    pass


class OrderNotPaidError(OrderLifecycleError):
    """Fulfilment needs at least the advance to be paid."""
