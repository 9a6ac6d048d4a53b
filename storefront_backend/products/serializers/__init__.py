from .product import ProductSerializer
from .review import ReviewSerializer, SubmitReviewInputSerializer

__all__ = [
    "ProductSerializer",
    "ReviewSerializer",
    "SubmitReviewInputSerializer",
]
