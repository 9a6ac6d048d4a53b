"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .product import Product
from .review import Review

__all__ = [
    "Product",
    "Review",
]
