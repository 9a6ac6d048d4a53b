# bidding/views/offer.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from bidding.serializers import BidOfferSerializer, OfferStatusInputSerializer
from bidding.services import bid_service
from bidding.services.exceptions import BidNotFound, BidPermissionError


class MyOffersView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BidOfferSerializer

    @extend_schema(responses={200: BidOfferSerializer(many=True)}, description="Offers made by the caller")
    def get(self, request):
        offers = bid_service.offers_by_buyer(request.user)
        return Response(BidOfferSerializer(offers, many=True).data)


class OfferStatusView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BidOfferSerializer

    @extend_schema(request=OfferStatusInputSerializer, responses={200: BidOfferSerializer})
    def patch(self, request, offer_id):
        serializer = OfferStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            offer = bid_service.get_offer(offer_id)
            offer = bid_service.update_offer_status(
                user=request.user,
                offer=offer,
                status=serializer.validated_data["status"],
            )
        except BidNotFound as exc:
            return error_response(code="OFFER_NOT_FOUND", message=str(exc), http_status=status.HTTP_404_NOT_FOUND)
        except BidPermissionError as exc:
            return error_response(code="NOT_BID_SELLER", message=str(exc), http_status=status.HTTP_403_FORBIDDEN)

        return Response(BidOfferSerializer(offer).data)
