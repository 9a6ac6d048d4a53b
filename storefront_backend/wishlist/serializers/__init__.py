# wishlist/serializers/__init__.py

from rest_framework import serializers

from wishlist.models import WishlistItem


class WishlistItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = WishlistItem
        fields = [
            "product_id",
            "name",
            "base_price",
            "discount_price",
            "featured_image",
            "brand",
            "added_at",
        ]
        read_only_fields = fields


class WishlistStatusSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    in_wishlist = serializers.BooleanField()


__all__ = ["WishlistItemSerializer", "WishlistStatusSerializer"]
