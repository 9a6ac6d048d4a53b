# orders/models/order.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Order(models.Model):
    """
    Buyer order created from the cart or from a bid offer.

    Key rules:
    - Order is created PENDING / payment PENDING
    - Advance captured  -> PROCESSING / PARTIAL
    - Remaining captured -> payment COMPLETED
    - paid_amount + remaining_amount == total_amount at all times
    - Status transitions live in services/order_lifecycle.py
    """

    STATUS_PENDING = "pending"
    STATUS_PROCESSING = "processing"
    STATUS_IN_TRANSIT = "in_transit"
    STATUS_DELIVERED = "delivered"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_PROCESSING, "Processing"),
        (STATUS_IN_TRANSIT, "In transit"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    PAYMENT_PENDING = "pending"
    PAYMENT_PARTIAL = "partial"
    PAYMENT_COMPLETED = "completed"
    PAYMENT_FAILED = "failed"
    PAYMENT_REFUNDED = "refunded"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, "Pending"),
        (PAYMENT_PARTIAL, "Partially paid"),
        (PAYMENT_COMPLETED, "Completed"),
        (PAYMENT_FAILED, "Failed"),
        (PAYMENT_REFUNDED, "Refunded"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_no = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated public order number",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    payment_status = models.CharField(
        max_length=20,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_PENDING,
        db_index=True,
    )
    payment_error = models.CharField(max_length=255, blank=True, default="")

    # Money fields (server authoritative)
    items_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    remaining_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    # Shipping
    shipping_address = models.JSONField(default=dict, blank=True)
    courier_id = models.PositiveIntegerField(null=True, blank=True)
    courier_name = models.CharField(max_length=120, blank=True, default="")
    tracking_id = models.CharField(max_length=64, blank=True, default="")
    estimated_delivery = models.DateField(null=True, blank=True)

    # Bid orders
    is_bid_order = models.BooleanField(default=False)
    bid = models.ForeignKey(
        "bidding.Bid",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    bid_offer = models.ForeignKey(
        "bidding.BidOffer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.total_amount is None or Decimal(self.total_amount) <= 0:
            raise ValidationError({"total_amount": "Total amount must be greater than zero"})

        paid = Decimal(self.paid_amount or 0)
        remaining = Decimal(self.remaining_amount or 0)
        if paid < 0 or remaining < 0:
            raise ValidationError("paid_amount and remaining_amount cannot be negative")
        if paid + remaining != Decimal(self.total_amount):
            raise ValidationError("paid_amount + remaining_amount must equal total_amount")

        if self.is_bid_order and not self.bid_offer_id:
            raise ValidationError({"bid_offer": "Bid orders must reference a bid offer"})

    def save(self, *args, **kwargs):
        if not self.order_no:
            prefix = timezone.now().strftime("ORD%Y%m%d")
            self.order_no = f"{prefix}-{uuid.uuid4().hex[:8].upper()}"

        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_no} | {self.total_amount} | {self.status}"
