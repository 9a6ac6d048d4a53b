# payments/services/exceptions.py

"""
PAYMENT SERVICE ERRORS
"""


class PaymentError(Exception):
    """Base exception for the split-payment flow."""


class PaymentPermissionError(PaymentError):
    pass


class PaymentStateError(PaymentError):
    """Raised when the order is not in the right state for this payment step."""


class PaymentVerificationError(PaymentError):
    """Raised when a checkout signature or captured amount does not match."""


# ---------------- GATEWAY CLIENT ----------------
class RazorpayError(PaymentError):
    """Gateway failure: transport error, non-JSON body or an error response."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RazorpayConfigError(RazorpayError):
    """Raised when key id / secret are not configured."""
