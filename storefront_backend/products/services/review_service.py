# products/services/review_service.py

"""
REVIEW SERVICE

Invariants:
- one review per (product, user): submit edits the existing one
- after every create / update / delete the product's avg_rating and
  review_count are recomputed from the remaining rows (0 / 0 when none)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction
from django.db.models import Avg, Count

from products.models import Product, Review
from products.services.exceptions import ReviewError, ReviewPermissionError

TWOPLACES = Decimal("0.01")


def get_reviews(product: Product):
    return Review.objects.filter(product=product).order_by("-created_at")


def recompute_rating(product_id) -> Product:
    stats = Review.objects.filter(product_id=product_id).aggregate(
        avg=Avg("rating"),
        count=Count("id"),
    )

    count = stats["count"] or 0
    avg = Decimal(str(stats["avg"] or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)

    Product.objects.filter(id=product_id).update(avg_rating=avg, review_count=count)
    return Product.objects.get(id=product_id)


@transaction.atomic
def submit_review(*, user, product: Product, rating: int, text: str = "") -> Review:
    try:
        rating = int(rating)
    except (TypeError, ValueError):
        raise ReviewError("Rating must be a whole number between 1 and 5")

    if rating < 1 or rating > 5:
        raise ReviewError("Rating must be a whole number between 1 and 5")

    review = (
        Review.objects.select_for_update()
        .filter(product=product, user=user)
        .first()
    )

    if review is None:
        review = Review.objects.create(
            product=product,
            user=user,
            user_name=user.display_name or "Anonymous User",
            user_photo=user.avatar_url or "",
            rating=rating,
            text=text or "",
        )
    else:
        review.rating = rating
        review.text = text or ""
        review.save(update_fields=["rating", "text", "updated_at"])

    recompute_rating(product.id)
    return review


@transaction.atomic
def delete_review(*, user, review: Review) -> None:
    if review.user_id != user.id:
        raise ReviewPermissionError("Not authorized to delete this review")

    product_id = review.product_id
    review.delete()
    recompute_rating(product_id)
