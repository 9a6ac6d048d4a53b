# cart/views/__init__.py

from .api import (
    CartItemDetailView,
    CartItemsView,
    CartShippingAddressView,
    CartView,
)

__all__ = [
    "CartView",
    "CartItemsView",
    "CartItemDetailView",
    "CartShippingAddressView",
]
