# products/views/__init__.py

from .product import ProductViewSet
from .review import ReviewDetailView

__all__ = [
    "ProductViewSet",
    "ReviewDetailView",
]
