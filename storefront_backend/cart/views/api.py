# cart/views/api.py

"""
CART API VIEWS

Purpose:
- The buyer's persistent cart (get-or-create on first access)
- Add / update / remove / clear items
- Shipping destination pincode (rates are quoted by the shipping app)

Every endpoint returns the full cart so the client can re-render in one round trip.
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from cart.serializers import (
    AddCartItemInputSerializer,
    CartSerializer,
    ShippingAddressInputSerializer,
    UpdateCartItemInputSerializer,
)
from cart.services import cart_service
from cart.services.exceptions import InvalidPincodeError, ProductUnavailableError
from products.models import Product


def _cart_response(cart, http_status=status.HTTP_200_OK):
    cart.refresh_from_db()
    return Response(CartSerializer(cart).data, status=http_status)


class CartView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(responses={200: CartSerializer}, description="Get (or create) the cart")
    def get(self, request):
        cart = cart_service.get_or_create_cart(request.user)
        return _cart_response(cart)

    @extend_schema(responses={200: CartSerializer}, description="Clear items and shipping state")
    def delete(self, request):
        cart = cart_service.get_or_create_cart(request.user)
        cart_service.clear_cart(cart)
        return _cart_response(cart)


class CartItemsView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        request=AddCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Add a product (increments quantity if already in the cart)",
    )
    def post(self, request):
        serializer = AddCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = get_object_or_404(Product, id=serializer.validated_data["product_id"])
        cart = cart_service.get_or_create_cart(request.user)

        try:
            cart_service.add_item(cart, product, serializer.validated_data["quantity"])
        except ProductUnavailableError as exc:
            return error_response(
                code="PRODUCT_UNAVAILABLE",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return _cart_response(cart)


class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        request=UpdateCartItemInputSerializer,
        responses={200: CartSerializer},
        description="Set quantity (<= 0 removes the item)",
    )
    def patch(self, request, product_id):
        serializer = UpdateCartItemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = cart_service.get_or_create_cart(request.user)
        cart_service.update_quantity(cart, product_id, serializer.validated_data["quantity"])
        return _cart_response(cart)

    @extend_schema(responses={200: CartSerializer})
    def delete(self, request, product_id):
        cart = cart_service.get_or_create_cart(request.user)
        cart_service.remove_item(cart, product_id)
        return _cart_response(cart)


class CartShippingAddressView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        request=ShippingAddressInputSerializer,
        responses={200: CartSerializer},
        description="Set the destination pincode (drops any selected courier)",
    )
    def put(self, request):
        serializer = ShippingAddressInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = cart_service.get_or_create_cart(request.user)
        try:
            cart_service.set_shipping_pincode(cart, serializer.validated_data["pincode"])
        except InvalidPincodeError as exc:
            return error_response(
                code="INVALID_PINCODE",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        return _cart_response(cart)
