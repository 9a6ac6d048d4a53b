# bidding/models/bid_offer.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class BidOffer(models.Model):
    """
    A buyer's price/quantity answer to a Bid.

    Accepted only after the advance payment of its bid order is captured.
    """

    STATUS_PENDING = "pending"
    STATUS_ACCEPTED = "accepted"
    STATUS_REJECTED = "rejected"
    STATUS_COUNTEROFFERED = "counteroffered"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_COUNTEROFFERED, "Counter-offered"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    bid = models.ForeignKey("bidding.Bid", on_delete=models.CASCADE, related_name="offers")
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.CASCADE,
        related_name="bid_offers",
    )
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bid_offers_made",
    )
    seller = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bid_offers_received",
    )

    bid_amount = models.DecimalField(max_digits=12, decimal_places=2, help_text="Offered price per piece")
    quantity = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)

    buyer_name = models.CharField(max_length=150, blank=True, default="")
    message = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.bid_amount is None or Decimal(self.bid_amount) <= 0:
            raise ValidationError({"bid_amount": "Bid amount must be greater than zero"})
        if self.quantity is None or int(self.quantity) < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def total_amount(self) -> Decimal:
        return (Decimal(self.bid_amount) * int(self.quantity)).quantize(Decimal("0.01"))

    def __str__(self):
        return f"{self.buyer_name or self.buyer_id}: {self.quantity} @ {self.bid_amount}"
