# bidding/models/__init__.py

from .bid import Bid
from .bid_offer import BidOffer

__all__ = ["Bid", "BidOffer"]
