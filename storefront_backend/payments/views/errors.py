# payments/views/errors.py

from rest_framework import status

from backend.api_errors import error_response
from orders.services.exceptions import InvalidOrderTransitionError
from payments.services.exceptions import (
    PaymentPermissionError,
    PaymentStateError,
    PaymentVerificationError,
    RazorpayConfigError,
    RazorpayError,
)

# Most specific first.
ERROR_MAP = (
    (PaymentPermissionError, "NOT_ORDER_OWNER", status.HTTP_403_FORBIDDEN),
    (PaymentVerificationError, "PAYMENT_VERIFICATION_FAILED", status.HTTP_400_BAD_REQUEST),
    (PaymentStateError, "INVALID_PAYMENT_STATE", status.HTTP_409_CONFLICT),
    (InvalidOrderTransitionError, "INVALID_TRANSITION", status.HTTP_409_CONFLICT),
    (RazorpayConfigError, "PAYMENTS_NOT_CONFIGURED", status.HTTP_503_SERVICE_UNAVAILABLE),
    (RazorpayError, "PAYMENT_PROVIDER_ERROR", status.HTTP_502_BAD_GATEWAY),
)


def payment_error_response(exc: Exception):
    for exc_type, code, http_status in ERROR_MAP:
        if isinstance(exc, exc_type):
            return error_response(code=code, message=str(exc), http_status=http_status)
    return error_response(code="PAYMENT_ERROR", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)
