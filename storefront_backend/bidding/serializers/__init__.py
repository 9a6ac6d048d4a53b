# bidding/serializers/__init__.py

from decimal import Decimal

from rest_framework import serializers

from bidding.models import Bid, BidOffer
from products.serializers import ProductSerializer

MIN_AMOUNT = Decimal("0.01")


class BidSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)
    seller_id = serializers.UUIDField(read_only=True)
    product_details = ProductSerializer(source="product", read_only=True)
    is_accepting_offers = serializers.BooleanField(read_only=True)

    class Meta:
        model = Bid
        fields = [
            "id",
            "product_id",
            "seller_id",
            "base_price",
            "moq",
            "end_time",
            "status",
            "description",
            "bid_count",
            "is_accepting_offers",
            "product_details",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BidCreateInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=MIN_AMOUNT)
    moq = serializers.IntegerField(min_value=1, default=1)
    end_time = serializers.DateTimeField()
    description = serializers.CharField(required=False, allow_blank=True, default="")


class BidUpdateInputSerializer(serializers.Serializer):
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=MIN_AMOUNT, required=False)
    moq = serializers.IntegerField(min_value=1, required=False)
    end_time = serializers.DateTimeField(required=False)
    status = serializers.ChoiceField(choices=Bid.STATUS_CHOICES, required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class BidOfferSerializer(serializers.ModelSerializer):
    bid_id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)
    buyer_id = serializers.UUIDField(read_only=True)
    seller_id = serializers.UUIDField(read_only=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = BidOffer
        fields = [
            "id",
            "bid_id",
            "product_id",
            "buyer_id",
            "seller_id",
            "bid_amount",
            "quantity",
            "total_amount",
            "status",
            "buyer_name",
            "message",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SubmitOfferInputSerializer(serializers.Serializer):
    bid_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=MIN_AMOUNT)
    quantity = serializers.IntegerField(min_value=1)
    message = serializers.CharField(required=False, allow_blank=True, default="")


class OfferStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BidOffer.STATUS_CHOICES)


class PopularProductSerializer(serializers.Serializer):
    product = ProductSerializer(read_only=True)
    recommended_bid_price = serializers.IntegerField(read_only=True)
