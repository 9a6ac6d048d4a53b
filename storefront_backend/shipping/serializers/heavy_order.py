# shipping/serializers/heavy_order.py

from rest_framework import serializers

from shipping.models import HeavyOrder


class HeavyOrderProductLineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    category = serializers.CharField(max_length=50, required=False, allow_blank=True, default="Others")
    quantity = serializers.IntegerField(min_value=1)
    weight = serializers.FloatField(min_value=0.1)
    length = serializers.FloatField(min_value=1)
    width = serializers.FloatField(min_value=1)
    height = serializers.FloatField(min_value=1)


class HeavyOrderSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(read_only=True)

    class Meta:
        model = HeavyOrder
        fields = [
            "id",
            "invoice_id",
            "warehouse_id",
            "customer_name",
            "first_name",
            "last_name",
            "company_name",
            "email",
            "phone",
            "address_line1",
            "address_line2",
            "landmark",
            "city",
            "state",
            "pincode",
            "products",
            "total_amount",
            "advance_amount",
            "cod_amount",
            "ewaybill_number",
            "system_order_id",
            "courier_id",
            "awb",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class HeavyOrderCreateSerializer(serializers.Serializer):
    invoice_id = serializers.CharField(max_length=64)
    warehouse_id = serializers.IntegerField(min_value=1)

    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(max_length=100)
    company_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(max_length=20)

    address_line1 = serializers.CharField(max_length=255)
    address_line2 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    landmark = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    state = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    pincode = serializers.RegexField(
        r"^\d{6}$",
        error_messages={"invalid": "Enter a valid 6-digit pincode"},
    )

    products = HeavyOrderProductLineSerializer(many=True, allow_empty=False)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=1)

    ewaybill_number = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    invoice_document_file = serializers.CharField(max_length=500)
    ewaybill_document_file = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")

    def validate_invoice_id(self, value):
        value = value.strip()
        if HeavyOrder.objects.filter(invoice_id=value).exists():
            raise serializers.ValidationError("A heavy order with this invoice id already exists")
        return value


class ManifestInputSerializer(serializers.Serializer):
    courier_id = serializers.IntegerField(min_value=1)
