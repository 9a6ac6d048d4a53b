# users/models/address.py

import re
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

PINCODE_RE = re.compile(r"^\d{6}$")


class Address(models.Model):
    """
    Saved shipping address.

    Rules:
    - pincode is a 6-digit Indian postal code
    - at most one default address per user (DB constraint)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="addresses",
    )

    label = models.CharField(max_length=50, blank=True, default="")
    contact_name = models.CharField(max_length=120)
    phone = models.CharField(max_length=20)

    address_line1 = models.CharField(max_length=255)
    address_line2 = models.CharField(max_length=255, blank=True, default="")
    landmark = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=6)

    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(is_default=True),
                name="one_default_address_per_user",
            )
        ]

    def clean(self):
        self.pincode = (self.pincode or "").strip()
        if not PINCODE_RE.match(self.pincode):
            raise ValidationError({"pincode": "Enter a valid 6-digit pincode"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def as_shipping_address(self) -> dict:
        return {
            "name": self.contact_name,
            "phone": self.phone,
            "address_line1": self.address_line1,
            "address_line2": self.address_line2,
            "landmark": self.landmark,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
        }

    def __str__(self):
        return f"{self.contact_name}, {self.city} {self.pincode}"
