# users/serializers.py

from django.contrib.auth import get_user_model
from rest_framework import serializers

from users.models import Address

User = get_user_model()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "phone",
            "avatar_url",
            "role",
            "created_at",
        ]
        read_only_fields = fields


# ---------------- ME UPDATE (INPUT ONLY) ----------------
class MeUpdateSerializer(serializers.Serializer):
    """
    Self-service profile edits.
    Admin is never self-assigned.
    """

    display_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    avatar_url = serializers.URLField(required=False, allow_blank=True)
    role = serializers.ChoiceField(
        choices=[User.ROLE_BUYER, User.ROLE_SELLER],
        required=False,
    )


# ---------------- PUBLIC PROFILE ----------------
class UserProfileSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField()
    avatar = serializers.CharField(allow_blank=True)
    type = serializers.CharField()


# ---------------- ADDRESSES ----------------
class AddressSerializer(serializers.ModelSerializer):
    pincode = serializers.RegexField(
        r"^\d{6}$",
        error_messages={"invalid": "Enter a valid 6-digit pincode"},
    )

    class Meta:
        model = Address
        fields = [
            "id",
            "label",
            "contact_name",
            "phone",
            "address_line1",
            "address_line2",
            "landmark",
            "city",
            "state",
            "pincode",
            "is_default",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
