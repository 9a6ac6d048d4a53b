# payments/serializers/__init__.py

from rest_framework import serializers

from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)
    heavy_order_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "order_id",
            "heavy_order_id",
            "amount",
            "currency",
            "status",
            "method",
            "kind",
            "gateway_order_id",
            "payment_id",
            "error_message",
            "created_at",
        ]
        read_only_fields = fields


class PrefillSerializer(serializers.Serializer):
    email = serializers.CharField()
    contact = serializers.CharField()
    name = serializers.CharField()


class CheckoutOptionsSerializer(serializers.Serializer):
    """Options handed to the gateway's client-side checkout widget."""

    key = serializers.CharField()
    amount = serializers.IntegerField(help_text="Amount in paise")
    currency = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    order_id = serializers.CharField(help_text="Gateway order id")
    prefill = PrefillSerializer()


class ConfirmPaymentInputSerializer(serializers.Serializer):
    razorpay_order_id = serializers.CharField(max_length=64)
    razorpay_payment_id = serializers.CharField(max_length=64)
    razorpay_signature = serializers.CharField(max_length=256)


class FailPaymentInputSerializer(serializers.Serializer):
    error = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
