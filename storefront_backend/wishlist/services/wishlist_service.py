# wishlist/services/wishlist_service.py

from __future__ import annotations

from django.utils import timezone

from wishlist.models import WishlistItem


def _snapshot(product) -> dict:
    return {
        "name": product.name,
        "base_price": product.base_price,
        "discount_price": product.discount_price,
        "featured_image": product.featured_image or "",
        "brand": product.brand or "",
    }


def is_in_wishlist(*, user, product_id) -> bool:
    return WishlistItem.objects.filter(user=user, product_id=product_id).exists()


def add_to_wishlist(*, user, product) -> WishlistItem:
    """Idempotent: re-adding refreshes the snapshot and bumps added_at."""
    item, _ = WishlistItem.objects.update_or_create(
        user=user,
        product=product,
        defaults={**_snapshot(product), "added_at": timezone.now()},
    )
    return item


def remove_from_wishlist(*, user, product_id) -> bool:
    deleted, _ = WishlistItem.objects.filter(user=user, product_id=product_id).delete()
    return bool(deleted)


def get_wishlist(*, user):
    return WishlistItem.objects.filter(user=user).order_by("-added_at")


def clear_wishlist(*, user) -> int:
    deleted, _ = WishlistItem.objects.filter(user=user).delete()
    return deleted


def wishlist_count(*, user) -> int:
    return WishlistItem.objects.filter(user=user).count()
