import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="HeavyOrder",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("invoice_id", models.CharField(max_length=64, unique=True)),
                (
                    "warehouse_id",
                    models.PositiveIntegerField(help_text="Aggregator pickup/return location id"),
                ),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("company_name", models.CharField(blank=True, default="", max_length=150)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("phone", models.CharField(max_length=20)),
                ("address_line1", models.CharField(max_length=255)),
                ("address_line2", models.CharField(blank=True, default="", max_length=255)),
                ("landmark", models.CharField(blank=True, default="", max_length=255)),
                ("city", models.CharField(blank=True, default="", max_length=100)),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("pincode", models.CharField(max_length=6)),
                ("products", models.JSONField(default=list)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("advance_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("cod_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("ewaybill_number", models.CharField(blank=True, default="", max_length=64)),
                ("invoice_document_file", models.CharField(blank=True, default="", max_length=500)),
                ("ewaybill_document_file", models.CharField(blank=True, default="", max_length=500)),
                ("system_order_id", models.PositiveBigIntegerField(blank=True, db_index=True, null=True)),
                ("courier_id", models.PositiveIntegerField(blank=True, null=True)),
                ("awb", models.CharField(blank=True, default="", max_length=64)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("advance_paid", "Advance paid"),
                            ("created", "Created at aggregator"),
                            ("manifested", "Manifested"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="heavy_orders",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
