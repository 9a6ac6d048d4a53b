# users/views/profile.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from users.serializers import UserProfileSerializer
from users.services.profile_service import get_user_profile_cached


class UserProfileView(APIView):
    """
    Public profile of any user (chat headers, bid listings, reviews).
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserProfileSerializer

    @extend_schema(responses={200: UserProfileSerializer})
    def get(self, request, user_id):
        profile = get_user_profile_cached(user_id)
        if profile is None:
            return error_response(
                code="USER_NOT_FOUND",
                message="User not found.",
                http_status=status.HTTP_404_NOT_FOUND,
            )
        return Response(profile)
