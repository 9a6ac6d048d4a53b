# products/services/exceptions.py

"""
CATALOG SERVICE ERRORS
"""


class CatalogError(Exception):
    """Base exception for catalog and review failures."""


class ProductNotFound(CatalogError):
    pass


class ProductPermissionError(CatalogError):
    """Raised when a non-owner tries to change a listing."""


class ReviewError(CatalogError):
    pass


class ReviewPermissionError(ReviewError):
    """Raised when someone other than the author deletes a review."""
