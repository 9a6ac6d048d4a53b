# bidding/views/bid.py

"""
BID VIEWSET

Public reads:
- list (?seller= ?status=), retrieve with product details
- popular : products to open bids on, with a recommended price

Sellers (bid owner or admin):
- create / update / delete
- offers (GET) : offers received on the bid

Buyers:
- offers (POST) : submit an offer
"""

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import error_response
from bidding.serializers import (
    BidCreateInputSerializer,
    BidOfferSerializer,
    BidSerializer,
    BidUpdateInputSerializer,
    PopularProductSerializer,
    SubmitOfferInputSerializer,
)
from bidding.services import bid_service
from bidding.services.exceptions import BidClosedError, BidPermissionError, InvalidOfferError
from products.models import Product
from users.permissions import IsSellerOrAdmin


def _not_bid_seller(exc):
    return error_response(
        code="NOT_BID_SELLER",
        message=str(exc),
        http_status=status.HTTP_403_FORBIDDEN,
    )


class BidViewSet(viewsets.ModelViewSet):
    serializer_class = BidSerializer
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_queryset(self):
        params = self.request.query_params
        return bid_service.list_bids(
            seller_id=(params.get("seller") or "").strip() or None,
            status=(params.get("status") or "").strip() or None,
        )

    def get_permissions(self):
        if self.action in {"create", "partial_update", "destroy"}:
            return [IsAuthenticated(), IsSellerOrAdmin()]
        if self.action == "offers":
            return [IsAuthenticated()]
        return [AllowAny()]

    @extend_schema(request=BidCreateInputSerializer, responses={201: BidSerializer})
    def create(self, request, *args, **kwargs):
        serializer = BidCreateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        product = get_object_or_404(Product, id=data.pop("product_id"))
        try:
            bid = bid_service.create_bid(seller=request.user, product=product, data=data)
        except BidPermissionError as exc:
            return error_response(
                code="NOT_PRODUCT_OWNER",
                message=str(exc),
                http_status=status.HTTP_403_FORBIDDEN,
            )

        return Response(BidSerializer(bid).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BidUpdateInputSerializer, responses={200: BidSerializer})
    def partial_update(self, request, *args, **kwargs):
        bid = self.get_object()
        serializer = BidUpdateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bid = bid_service.update_bid(user=request.user, bid=bid, data=serializer.validated_data)
        except BidPermissionError as exc:
            return _not_bid_seller(exc)

        return Response(BidSerializer(bid).data)

    def destroy(self, request, *args, **kwargs):
        bid = self.get_object()
        try:
            bid_service.delete_bid(user=request.user, bid=bid)
        except BidPermissionError as exc:
            return _not_bid_seller(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[OpenApiParameter("limit", int, required=False)],
        responses={200: PopularProductSerializer(many=True)},
        description="Most viewed products with a recommended per-piece bid price",
    )
    @action(detail=False, methods=["get"])
    def popular(self, request):
        try:
            limit = max(1, min(int(request.query_params.get("limit") or 10), 50))
        except ValueError:
            limit = 10

        rows = [
            {"product": product, "recommended_bid_price": price}
            for product, price in bid_service.popular_for_bidding(limit=limit)
        ]
        return Response(PopularProductSerializer(rows, many=True).data)

    @extend_schema(
        request=SubmitOfferInputSerializer,
        responses={200: BidOfferSerializer(many=True), 201: BidOfferSerializer},
    )
    @action(detail=True, methods=["get", "post"])
    def offers(self, request, pk=None):
        bid = self.get_object()

        if request.method == "GET":
            if bid.seller_id != request.user.id and request.user.role != "admin":
                return _not_bid_seller(BidPermissionError("Only the seller can view offers on this bid"))
            offers = bid_service.offers_for_bid(bid)
            return Response(BidOfferSerializer(offers, many=True).data)

        serializer = SubmitOfferInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            offer = bid_service.submit_offer(buyer=request.user, bid=bid, **serializer.validated_data)
        except BidClosedError as exc:
            return error_response(
                code="BID_CLOSED",
                message=str(exc),
                http_status=status.HTTP_409_CONFLICT,
            )
        except InvalidOfferError as exc:
            return error_response(
                code="INVALID_OFFER",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(BidOfferSerializer(offer).data, status=status.HTTP_201_CREATED)
