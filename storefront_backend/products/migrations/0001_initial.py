import uuid
from decimal import Decimal

import django.core.validators
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
            name="Product",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(db_index=True, max_length=255)),
                ("sku", models.CharField(blank=True, default="", max_length=128)),
                ("base_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("discount_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("description", models.TextField(blank=True, default="")),
                ("short_description", models.CharField(blank=True, default="", max_length=500)),
                ("category", models.CharField(blank=True, db_index=True, default="", max_length=100)),
                ("category_name", models.CharField(blank=True, db_index=True, default="", max_length=100)),
                ("brand", models.CharField(blank=True, default="", max_length=100)),
                ("color", models.CharField(blank=True, default="", max_length=50)),
                ("size", models.CharField(blank=True, default="", max_length=50)),
                ("weight_kg", models.DecimalField(blank=True, decimal_places=3, max_digits=8, null=True)),
                ("length_cm", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("width_cm", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("height_cm", models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ("stock_quantity", models.PositiveIntegerField(default=0)),
                ("free_shipping", models.BooleanField(default=False)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("draft", "Draft"), ("archived", "Archived")],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("featured_image", models.URLField(blank=True, default="", max_length=500)),
                ("images", models.JSONField(blank=True, default=list)),
                ("videos", models.JSONField(blank=True, default=list)),
                ("view_count", models.PositiveIntegerField(default=0)),
                ("avg_rating", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=3)),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Review",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("user_name", models.CharField(default="Anonymous User", max_length=150)),
                ("user_photo", models.URLField(blank=True, default="", max_length=500)),
                (
                    "rating",
                    models.PositiveSmallIntegerField(
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(5),
                        ]
                    ),
                ),
                ("text", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to="products.product",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="review",
            constraint=models.UniqueConstraint(
                fields=("product", "user"),
                name="unique_review_per_user_product",
            ),
        ),
    ]
