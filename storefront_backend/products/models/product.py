# products/models/product.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    A seller's listing.

    PRICING:
    - base_price is the list price
    - discount_price (optional) wins when set and > 0 (see effective_price)

    SHIPPING DATA:
    - weight_kg and length/width/height in cm feed the shipping estimator
    - missing values fall back to estimator defaults (0.5 kg, 10 cm)

    DENORMALIZED COUNTERS:
    - view_count is incremented atomically (F-expression)
    - avg_rating / review_count are recomputed by review_service
    """

    STATUS_ACTIVE = "active"
    STATUS_DRAFT = "draft"
    STATUS_ARCHIVED = "archived"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_DRAFT, "Draft"),
        (STATUS_ARCHIVED, "Archived"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    sku = models.CharField(max_length=128, blank=True, default="")

    base_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    description = models.TextField(blank=True, default="")
    short_description = models.CharField(max_length=500, blank=True, default="")

    category = models.CharField(max_length=100, blank=True, default="", db_index=True)
    category_name = models.CharField(max_length=100, blank=True, default="", db_index=True)

    brand = models.CharField(max_length=100, blank=True, default="")
    color = models.CharField(max_length=50, blank=True, default="")
    size = models.CharField(max_length=50, blank=True, default="")

    weight_kg = models.DecimalField(max_digits=8, decimal_places=3, null=True, blank=True)
    length_cm = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    width_cm = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    height_cm = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)

    stock_quantity = models.PositiveIntegerField(default=0)
    free_shipping = models.BooleanField(default=False)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    featured_image = models.URLField(max_length=500, blank=True, default="")
    images = models.JSONField(default=list, blank=True)
    videos = models.JSONField(default=list, blank=True)

    view_count = models.PositiveIntegerField(default=0)
    avg_rating = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal("0.00"))
    review_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    def clean(self):
        if self.base_price is None or Decimal(self.base_price) <= 0:
            raise ValidationError({"base_price": "Base price must be greater than zero"})

        if self.discount_price is not None and Decimal(self.discount_price) < 0:
            raise ValidationError({"discount_price": "Discount price cannot be negative"})

        if not isinstance(self.images, list) or not isinstance(self.videos, list):
            raise ValidationError("images and videos must be lists of URLs")

    @property
    def effective_price(self) -> Decimal:
        if self.discount_price is not None and Decimal(self.discount_price) > 0:
            return Decimal(self.discount_price)
        return Decimal(self.base_price)
