# users/views/me.py

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.serializers import MeUpdateSerializer, UserSerializer
from users.services.profile_service import clear_user_profile_cache


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    @extend_schema(
        responses={200: UserSerializer},
        description="Get current authenticated user profile",
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        request=MeUpdateSerializer,
        responses={200: UserSerializer},
        description="Update display name, phone, avatar URL or role (buyer/seller)",
    )
    def patch(self, request):
        serializer = MeUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        changed = []
        for field, value in serializer.validated_data.items():
            setattr(user, field, value)
            changed.append(field)

        if changed:
            user.full_clean(exclude=["password"])
            user.save(update_fields=changed + ["updated_at"])
            clear_user_profile_cache(user.id)

        return Response(UserSerializer(user).data)
