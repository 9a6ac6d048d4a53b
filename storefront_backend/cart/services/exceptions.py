# cart/services/exceptions.py


class CartError(Exception):
    """Base exception for cart failures."""


class ProductUnavailableError(CartError):
    """Raised when a product that is not active is added to a cart."""


class InvalidPincodeError(CartError):
    pass


class ShippingSelectionError(CartError):
    """Raised when a courier is chosen that was not in the cart's quotes."""
