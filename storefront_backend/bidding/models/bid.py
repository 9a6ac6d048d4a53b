# bidding/models/bid.py

"""
BID (seller-opened bulk sale)

A seller opens a bid on one of their products; buyers answer with BidOffers.
bid_count is maintained by the service with an F-expression.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Bid(models.Model):
    STATUS_OPEN = "open"
    STATUS_CLOSED = "closed"
    STATUS_AWARDED = "awarded"
    STATUS_EXPIRED = "expired"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
        (STATUS_AWARDED, "Awarded"),
        (STATUS_EXPIRED, "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="bids",
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bids",
    )

    base_price = models.DecimalField(max_digits=12, decimal_places=2)
    moq = models.PositiveIntegerField(default=1, help_text="Minimum order quantity")
    end_time = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    description = models.TextField(blank=True, default="")

    bid_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.base_price is None or Decimal(self.base_price) <= 0:
            raise ValidationError({"base_price": "Base price must be greater than zero"})
        if self.moq is not None and int(self.moq) < 1:
            raise ValidationError({"moq": "Minimum order quantity must be at least 1"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def is_accepting_offers(self) -> bool:
        return self.status == self.STATUS_OPEN and self.end_time > timezone.now()

    def __str__(self):
        return f"Bid on {self.product_id} ({self.status})"
