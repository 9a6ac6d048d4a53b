# payments/models/payment.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class Payment(models.Model):
    """
    One captured (or failed) gateway payment against an order or heavy order.

    Idempotency rule:
    - payment_id (gateway payment id) is unique; confirming the same
      payment twice (client + webhook) records it once.
    """

    STATUS_COMPLETED = "completed"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_COMPLETED, "Completed"),
        (STATUS_FAILED, "Failed"),
    ]

    METHOD_RAZORPAY = "razorpay"
    METHOD_COD = "cod"
    METHOD_OTHER = "other"

    METHOD_CHOICES = [
        (METHOD_RAZORPAY, "Razorpay"),
        (METHOD_COD, "Cash on delivery"),
        (METHOD_OTHER, "Other"),
    ]

    KIND_ADVANCE = "advance"
    KIND_REMAINING = "remaining"
    KIND_FULL = "full"

    KIND_CHOICES = [
        (KIND_ADVANCE, "Advance"),
        (KIND_REMAINING, "Remaining"),
        (KIND_FULL, "Full"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )
    heavy_order = models.ForeignKey(
        "shipping.HeavyOrder",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )

    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    currency = models.CharField(max_length=8, default="INR")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_COMPLETED, db_index=True)
    method = models.CharField(max_length=20, choices=METHOD_CHOICES, default=METHOD_RAZORPAY)
    kind = models.CharField(max_length=20, choices=KIND_CHOICES)

    gateway_order_id = models.CharField(max_length=64, blank=True, default="", db_index=True)
    payment_id = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        help_text="Gateway payment id. Unique for idempotency.",
    )
    signature = models.CharField(max_length=256, blank=True, default="")
    error_message = models.CharField(max_length=255, blank=True, default="")
    provider_payload = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if bool(self.order_id) == bool(self.heavy_order_id):
            raise ValidationError("A payment belongs to exactly one of order / heavy_order")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.kind} {self.amount} {self.currency} | {self.status}"
