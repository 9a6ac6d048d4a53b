# bidding/views/__init__.py

from .bid import BidViewSet
from .offer import MyOffersView, OfferStatusView

__all__ = ["BidViewSet", "MyOffersView", "OfferStatusView"]
