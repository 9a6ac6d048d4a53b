from .wishlist_item import WishlistItem

__all__ = ["WishlistItem"]
