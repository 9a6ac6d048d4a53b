# products/serializers/review.py

from rest_framework import serializers

from products.models import Review


class ReviewSerializer(serializers.ModelSerializer):
    user_id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Review
        fields = [
            "id",
            "product_id",
            "user_id",
            "user_name",
            "user_photo",
            "rating",
            "text",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class SubmitReviewInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    text = serializers.CharField(required=False, allow_blank=True, default="")
