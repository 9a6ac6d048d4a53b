# shipping/services/exceptions.py

"""
SHIPPING SERVICE ERRORS

Centralized domain errors for shipping services and the aggregator client.
"""


class ShippingError(Exception):
    """Base exception for all shipping failures."""


class InvalidPincodeError(ShippingError):
    pass


class EmptyShipmentError(ShippingError):
    """Raised when rates are requested for an empty cart."""


class NoRatesAvailable(ShippingError):
    """Raised when the aggregator returns no courier for the route."""


class ShippingSelectionError(ShippingError):
    """Raised when a courier is chosen that was not quoted."""


class ShippingConfigError(ShippingError):
    """Raised when credentials or the pickup pincode are not configured."""


# ---------------- AGGREGATOR CLIENT ----------------
class BigShipError(ShippingError):
    """Gateway failure: transport error, non-JSON body or success=false."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class BigShipAuthError(BigShipError):
    """HTTP 401 from the aggregator (expired or revoked token)."""


class BigShipRateLimited(BigShipError):
    """HTTP 429 from the aggregator."""


# ---------------- HEAVY ORDERS ----------------
class HeavyOrderError(ShippingError):
    pass


class InvalidHeavyOrderTransition(HeavyOrderError):
    pass


class HeavyOrderNotFound(HeavyOrderError):
    pass
