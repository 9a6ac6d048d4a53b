# shipping/views/errors.py

from rest_framework import status

from backend.api_errors import error_response
from shipping.services.exceptions import (
    BigShipError,
    BigShipRateLimited,
    EmptyShipmentError,
    HeavyOrderError,
    HeavyOrderNotFound,
    InvalidHeavyOrderTransition,
    InvalidPincodeError,
    NoRatesAvailable,
    ShippingConfigError,
    ShippingError,
    ShippingSelectionError,
)

# Most specific first.
ERROR_MAP = (
    (InvalidPincodeError, "INVALID_PINCODE", status.HTTP_400_BAD_REQUEST),
    (EmptyShipmentError, "EMPTY_CART", status.HTTP_400_BAD_REQUEST),
    (NoRatesAvailable, "NO_RATES", status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ShippingSelectionError, "COURIER_NOT_QUOTED", status.HTTP_409_CONFLICT),
    (HeavyOrderNotFound, "HEAVY_ORDER_NOT_FOUND", status.HTTP_404_NOT_FOUND),
    (InvalidHeavyOrderTransition, "INVALID_HEAVY_ORDER_TRANSITION", status.HTTP_409_CONFLICT),
    (HeavyOrderError, "HEAVY_ORDER_ERROR", status.HTTP_400_BAD_REQUEST),
    (ShippingConfigError, "SHIPPING_NOT_CONFIGURED", status.HTTP_503_SERVICE_UNAVAILABLE),
    (BigShipRateLimited, "SHIPPING_PROVIDER_BUSY", status.HTTP_503_SERVICE_UNAVAILABLE),
    (BigShipError, "SHIPPING_PROVIDER_ERROR", status.HTTP_502_BAD_GATEWAY),
)


def shipping_error_response(exc: ShippingError):
    for exc_type, code, http_status in ERROR_MAP:
        if isinstance(exc, exc_type):
            return error_response(code=code, message=str(exc), http_status=http_status)

    return error_response(
        code="SHIPPING_ERROR",
        message=str(exc),
        http_status=status.HTTP_400_BAD_REQUEST,
    )
