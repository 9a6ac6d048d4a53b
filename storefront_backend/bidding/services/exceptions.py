# bidding/services/exceptions.py

"""
BIDDING SERVICE ERRORS
"""


class BiddingError(Exception):
    """Base exception for bids and offers."""


class BidNotFound(BiddingError):
    pass


class BidPermissionError(BiddingError):
    """Raised when someone other than the bid's seller manages it."""


class BidClosedError(BiddingError):
    """Raised when an offer targets a bid that is not open or has ended."""


class InvalidOfferError(BiddingError):
    pass
