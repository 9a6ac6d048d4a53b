# shipping/models/heavy_order.py

"""
HEAVY ORDER (B2B freight)

Lifecycle (see services/heavy_order_lifecycle.py):
    draft -> advance_paid -> created -> manifested
    any non-terminal state -> cancelled

Money:
- total_amount = invoice value
- advance_amount = 50% paid online before the aggregator order is created
- cod_amount = remainder, collected by the courier (payment_type COD)
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class HeavyOrder(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_ADVANCE_PAID = "advance_paid"
    STATUS_CREATED = "created"
    STATUS_MANIFESTED = "manifested"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_ADVANCE_PAID, "Advance paid"),
        (STATUS_CREATED, "Created at aggregator"),
        (STATUS_MANIFESTED, "Manifested"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="heavy_orders",
    )

    invoice_id = models.CharField(max_length=64, unique=True)
    warehouse_id = models.PositiveIntegerField(help_text="Aggregator pickup/return location id")

    # ---------------- CONSIGNEE ----------------
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    company_name = models.CharField(max_length=150, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=20)

    address_line1 = models.CharField(max_length=255)
    address_line2 = models.CharField(max_length=255, blank=True, default="")
    landmark = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100, blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    pincode = models.CharField(max_length=6)

    # [{"name", "category", "quantity", "weight", "length", "width", "height"}]
    products = models.JSONField(default=list)

    # ---------------- MONEY ----------------
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    advance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    cod_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    # ---------------- DOCUMENTS ----------------
    ewaybill_number = models.CharField(max_length=64, blank=True, default="")
    invoice_document_file = models.CharField(max_length=500, blank=True, default="")
    ewaybill_document_file = models.CharField(max_length=500, blank=True, default="")

    # ---------------- AGGREGATOR ----------------
    system_order_id = models.PositiveBigIntegerField(null=True, blank=True, db_index=True)
    courier_id = models.PositiveIntegerField(null=True, blank=True)
    awb = models.CharField(max_length=64, blank=True, default="")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.total_amount is None or Decimal(self.total_amount) <= 0:
            raise ValidationError({"total_amount": "Total amount must be greater than zero"})

        if not isinstance(self.products, list) or not self.products:
            raise ValidationError({"products": "At least one product line is required"})

        if Decimal(self.advance_amount or 0) + Decimal(self.cod_amount or 0) != Decimal(self.total_amount):
            raise ValidationError("advance_amount + cod_amount must equal total_amount")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def customer_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return f"HeavyOrder {self.invoice_id} ({self.status})"
