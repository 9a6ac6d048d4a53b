# shipping/serializers/rates.py

from rest_framework import serializers

PINCODE_FIELD_KWARGS = {
    "regex": r"^\d{6}$",
    "error_messages": {"invalid": "Enter a valid 6-digit pincode"},
}


class CartQuoteInputSerializer(serializers.Serializer):
    pincode = serializers.RegexField(**PINCODE_FIELD_KWARGS)
    pickup_pincode = serializers.RegexField(required=False, **PINCODE_FIELD_KWARGS)
    b2b = serializers.BooleanField(required=False, default=False)
    payment_method = serializers.ChoiceField(choices=["prepaid", "cod"], required=False, default="prepaid")


class SelectRateInputSerializer(serializers.Serializer):
    courier_id = serializers.IntegerField(min_value=1)


class ProductRateInputSerializer(serializers.Serializer):
    """Single-product estimate for the product page calculator."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    pincode = serializers.RegexField(**PINCODE_FIELD_KWARGS)


class TrackingQuerySerializer(serializers.Serializer):
    tracking_type = serializers.ChoiceField(choices=["awb", "lrn"], default="awb")
    tracking_id = serializers.CharField(max_length=64)


class WarehouseInputSerializer(serializers.Serializer):
    address_line1 = serializers.CharField(max_length=255)
    address_line2 = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address_landmark = serializers.CharField(max_length=255, required=False, allow_blank=True)
    address_pincode = serializers.RegexField(**PINCODE_FIELD_KWARGS)
    contact_number_primary = serializers.CharField(max_length=20)

    def to_aggregator(self) -> dict:
        data = dict(self.validated_data)
        data["address_pincode"] = int(data["address_pincode"])
        return data
