"""
PATH: cart/models/cart.py

CART MODEL

Purpose:
- The buyer's single, persistent cart.
- Carries the shipping state chosen on the cart screen:
  destination pincode, quoted rates, selected courier, shipping cost, TAT.

Rules:
- One cart per user (DB constraint).
- Totals use LIVE product prices (effective price), never a snapshot.
- Any change to cart contents invalidates the shipping selection
  (enforced in cart_service).
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

User = settings.AUTH_USER_MODEL


class Cart(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name="cart",
    )

    # ---------------- SHIPPING STATE ----------------
    shipping_pincode = models.CharField(max_length=6, blank=True, default="")
    shipping_quotes = models.JSONField(
        default=list,
        blank=True,
        help_text="Last aggregator quotes for this cart, cheapest first.",
    )
    courier_id = models.PositiveIntegerField(null=True, blank=True)
    courier_name = models.CharField(max_length=120, blank=True, default="")
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    delivery_tat_days = models.PositiveSmallIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.user_id is None:
            raise ValidationError({"user": "user is required"})

        if self.shipping_cost is not None and self.shipping_cost < 0:
            raise ValidationError({"shipping_cost": "Shipping cost cannot be negative"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def has_shipping_selection(self) -> bool:
        return self.courier_id is not None

    @property
    def is_empty(self) -> bool:
        return not self.items.exists()

    def __str__(self):
        return f"Cart {self.id} | {self.user}"
