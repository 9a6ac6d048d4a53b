# orders/serializers/__init__.py

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    seller_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "seller_id",
            "product_name",
            "featured_image",
            "quantity",
            "unit_price",
            "line_total",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user_id = serializers.UUIDField(read_only=True)
    bid_id = serializers.UUIDField(read_only=True)
    bid_offer_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "user_id",
            "status",
            "payment_status",
            "payment_error",
            "items",
            "items_total",
            "shipping_cost",
            "total_amount",
            "paid_amount",
            "remaining_amount",
            "shipping_address",
            "courier_id",
            "courier_name",
            "tracking_id",
            "estimated_delivery",
            "is_bid_order",
            "bid_id",
            "bid_offer_id",
            "created_at",
            "updated_at",
            "paid_at",
            "delivered_at",
        ]
        read_only_fields = fields


class ShippingAddressSerializer(serializers.Serializer):
    """Free-form address; unknown keys are kept, nulls are dropped by the service."""

    name = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    phone = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    address_line1 = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    address_line2 = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    landmark = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    city = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    state = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    pincode = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class CheckoutInputSerializer(serializers.Serializer):
    address_id = serializers.UUIDField(required=False)
    shipping_address = ShippingAddressSerializer(required=False)

    def validate(self, attrs):
        if not attrs.get("address_id") and not attrs.get("shipping_address"):
            raise serializers.ValidationError("Provide address_id or shipping_address")
        return attrs


class BidOrderInputSerializer(serializers.Serializer):
    offer_id = serializers.UUIDField()
    address_id = serializers.UUIDField(required=False)
    shipping_address = ShippingAddressSerializer(required=False)


class OrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[
            Order.STATUS_PROCESSING,
            Order.STATUS_IN_TRANSIT,
            Order.STATUS_DELIVERED,
        ]
    )
    tracking_id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    estimated_delivery = serializers.DateField(required=False)
