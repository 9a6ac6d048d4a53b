# products/views/review.py

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from products.models import Review
from products.services.exceptions import ReviewPermissionError
from products.services.review_service import delete_review


class ReviewDetailView(APIView):
    """
    Authors can delete their own review; ratings are recomputed.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={204: None})
    def delete(self, request, review_id):
        review = get_object_or_404(Review, id=review_id)

        try:
            delete_review(user=request.user, review=review)
        except ReviewPermissionError as exc:
            return error_response(
                code="NOT_REVIEW_AUTHOR",
                message=str(exc),
                http_status=status.HTTP_403_FORBIDDEN,
            )

        return Response(status=status.HTTP_204_NO_CONTENT)
