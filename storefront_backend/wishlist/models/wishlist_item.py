# wishlist/models/wishlist_item.py

import uuid

from django.conf import settings
from django.db import models


class WishlistItem(models.Model):
    """
    Saved product with a display snapshot (name, prices, image, brand).

    The snapshot keeps the wishlist renderable after the listing changes;
    re-adding the product refreshes it.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wishlist_items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="wishlisted_by",
    )

    name = models.CharField(max_length=255)
    base_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    featured_image = models.URLField(max_length=500, blank=True, default="")
    brand = models.CharField(max_length=100, blank=True, default="")

    added_at = models.DateTimeField()

    class Meta:
        ordering = ["-added_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"],
                name="unique_wishlist_item_per_user_product",
            )
        ]

    def __str__(self):
        return f"{self.name} (wishlist of {self.user_id})"
