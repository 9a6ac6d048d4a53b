# products/serializers/product.py

"""
PRODUCT SERIALIZER

- effective_price is derived (discount wins when set and > 0)
- counters (views, rating, review count) are read-only; services own them
"""

from rest_framework import serializers

from products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    owner_id = serializers.UUIDField(read_only=True)
    owner_name = serializers.CharField(source="owner.public_name", read_only=True)
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    images = serializers.ListField(child=serializers.URLField(), required=False)
    videos = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = Product
        fields = [
            "id",
            "owner_id",
            "owner_name",
            "name",
            "sku",
            "base_price",
            "discount_price",
            "effective_price",
            "description",
            "short_description",
            "category",
            "category_name",
            "brand",
            "color",
            "size",
            "weight_kg",
            "length_cm",
            "width_cm",
            "height_cm",
            "stock_quantity",
            "free_shipping",
            "status",
            "featured_image",
            "images",
            "videos",
            "view_count",
            "avg_rating",
            "review_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "owner_id",
            "owner_name",
            "effective_price",
            "view_count",
            "avg_rating",
            "review_count",
            "created_at",
            "updated_at",
        ]

    def validate_base_price(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Base price must be greater than zero")
        return value

    def validate_discount_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Discount price cannot be negative")
        return value
