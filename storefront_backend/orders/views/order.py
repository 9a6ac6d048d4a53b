# orders/views/order.py

"""
ORDER VIEWSET

Buyers:
- list / retrieve own orders (newest first); ?role=seller lists orders to fulfil
- checkout (POST)  : cart -> pending order
- from-bid (POST)  : pending bid offer -> pending order
- cancel (POST)    : pending / processing only

Sellers / admin:
- status (POST)    : processing -> in_transit (tracking id) -> delivered
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.api_errors import error_response
from bidding.models import BidOffer
from cart.services import cart_service
from orders.models import Order
from orders.serializers import (
    BidOrderInputSerializer,
    CheckoutInputSerializer,
    OrderSerializer,
    OrderStatusInputSerializer,
)
from orders.services import checkout_orchestrator
from orders.services.exceptions import (
    CheckoutError,
    EmptyCartError,
    InvalidOrderTransitionError,
    OrderNotPaidError,
    OrderPermissionError,
)
from users.models import Address


def _resolve_address(user, data):
    """Saved address (owner-scoped) wins over an inline one."""
    address_id = data.get("address_id")
    if address_id:
        address = Address.objects.filter(id=address_id, user=user).first()
        if address is None:
            return None
        return address.as_shipping_address()
    return dict(data.get("shipping_address") or {})


def _address_not_found():
    return error_response(
        code="ADDRESS_NOT_FOUND",
        message="Address not found",
        http_status=status.HTTP_404_NOT_FOUND,
    )


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["status", "payment_status", "is_bid_order"]

    def get_queryset(self):
        user = self.request.user
        if self.action == "update_status" or self.request.query_params.get("role") == "seller":
            if user.role == "admin":
                return Order.objects.prefetch_related("items").order_by("-created_at")
            return checkout_orchestrator.get_seller_orders(user)
        return checkout_orchestrator.get_user_orders(user)

    @extend_schema(
        parameters=[OpenApiParameter("role", str, required=False, description="'seller' for orders to fulfil")]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=CheckoutInputSerializer, responses={201: OrderSerializer})
    @action(detail=False, methods=["post"])
    def checkout(self, request):
        serializer = CheckoutInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        address = _resolve_address(request.user, serializer.validated_data)
        if address is None:
            return _address_not_found()

        cart = cart_service.get_or_create_cart(request.user)
        try:
            order = checkout_orchestrator.create_order_from_cart(
                user=request.user,
                cart=cart,
                shipping_address=address,
            )
        except EmptyCartError as exc:
            return error_response(code="EMPTY_CART", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)
        except CheckoutError as exc:
            return error_response(code="CHECKOUT_FAILED", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=BidOrderInputSerializer, responses={201: OrderSerializer})
    @action(detail=False, methods=["post"], url_path="from-bid")
    def from_bid(self, request):
        serializer = BidOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        address = _resolve_address(request.user, serializer.validated_data)
        if address is None:
            return _address_not_found()

        offer = BidOffer.objects.filter(id=serializer.validated_data["offer_id"]).first()
        if offer is None:
            return error_response(
                code="OFFER_NOT_FOUND",
                message="Bid offer not found",
                http_status=status.HTTP_404_NOT_FOUND,
            )

        try:
            order = checkout_orchestrator.create_bid_order(
                user=request.user,
                offer=offer,
                shipping_address=address,
            )
        except OrderPermissionError as exc:
            return error_response(code="NOT_OFFER_BUYER", message=str(exc), http_status=status.HTTP_403_FORBIDDEN)
        except CheckoutError as exc:
            return error_response(code="CHECKOUT_FAILED", message=str(exc), http_status=status.HTTP_409_CONFLICT)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        order = self.get_object()
        try:
            order = checkout_orchestrator.cancel_order(user=request.user, order=order)
        except CheckoutError as exc:
            return error_response(code="ORDER_NOT_CANCELLABLE", message=str(exc), http_status=status.HTTP_409_CONFLICT)

        return Response(OrderSerializer(order).data)

    @extend_schema(request=OrderStatusInputSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        order = self.get_object()
        serializer = OrderStatusInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            order = checkout_orchestrator.advance_order_status(
                user=request.user,
                order=order,
                target_status=data["status"],
                tracking_id=data.get("tracking_id"),
                estimated_delivery=data.get("estimated_delivery"),
            )
        except OrderPermissionError as exc:
            return error_response(code="NOT_ORDER_SELLER", message=str(exc), http_status=status.HTTP_403_FORBIDDEN)
        except InvalidOrderTransitionError as exc:
            return error_response(code="INVALID_TRANSITION", message=str(exc), http_status=status.HTTP_409_CONFLICT)
        except OrderNotPaidError as exc:
            return error_response(code="ORDER_NOT_PAID", message=str(exc), http_status=status.HTTP_409_CONFLICT)
        except CheckoutError as exc:
            return error_response(code="TRACKING_REQUIRED", message=str(exc), http_status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderSerializer(order).data)
