# cart/serializers/__init__.py

"""
CART SERIALIZERS

Totals are computed server-side from live product prices.
"""

from rest_framework import serializers

from cart.models import Cart, CartItem
from cart.services import cart_service


class CartItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(source="product.name", read_only=True)
    featured_image = serializers.CharField(source="product.featured_image", read_only=True)
    base_price = serializers.DecimalField(
        source="product.base_price", max_digits=12, decimal_places=2, read_only=True
    )
    discount_price = serializers.DecimalField(
        source="product.discount_price", max_digits=12, decimal_places=2, read_only=True
    )
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = [
            "product_id",
            "name",
            "featured_image",
            "base_price",
            "discount_price",
            "unit_price",
            "quantity",
            "line_total",
        ]
        read_only_fields = fields


class CartSerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()
    item_count = serializers.SerializerMethodField()
    total_price = serializers.SerializerMethodField()
    grand_total = serializers.SerializerMethodField()
    selected_courier = serializers.SerializerMethodField()

    class Meta:
        model = Cart
        fields = [
            "id",
            "items",
            "item_count",
            "total_price",
            "shipping_pincode",
            "shipping_quotes",
            "selected_courier",
            "shipping_cost",
            "delivery_tat_days",
            "grand_total",
            "updated_at",
        ]
        read_only_fields = fields

    def get_items(self, obj):
        return CartItemSerializer(cart_service.cart_items(obj), many=True).data

    def get_item_count(self, obj) -> int:
        return cart_service.item_count(obj)

    def get_total_price(self, obj) -> str:
        return f"{cart_service.cart_total(obj):.2f}"

    def get_grand_total(self, obj) -> str:
        return f"{cart_service.grand_total(obj):.2f}"

    def get_selected_courier(self, obj):
        if obj.courier_id is None:
            return None
        return {"id": obj.courier_id, "name": obj.courier_name}


class AddCartItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class UpdateCartItemInputSerializer(serializers.Serializer):
    # Zero or negative removes the line.
    quantity = serializers.IntegerField()


class ShippingAddressInputSerializer(serializers.Serializer):
    pincode = serializers.CharField(max_length=6)


__all__ = [
    "CartSerializer",
    "CartItemSerializer",
    "AddCartItemInputSerializer",
    "UpdateCartItemInputSerializer",
    "ShippingAddressInputSerializer",
]
