# shipping/views/rates.py

"""
SHIPPING RATE VIEWS

- cart quote: estimates one box for the cart and stores the quotes on it
- select: picks another courier from the stored quotes
- product: product-page calculator, nothing stored
- tracking: AWB / LRN lookup
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from cart.serializers import CartSerializer
from cart.services import cart_service
from products.models import Product
from shipping.serializers import (
    CartQuoteInputSerializer,
    ProductRateInputSerializer,
    SelectRateInputSerializer,
    TrackingQuerySerializer,
)
from shipping.services import bigship, rate_service
from shipping.services.exceptions import ShippingError
from shipping.views.errors import shipping_error_response


class ShippingQuoteThrottle(UserRateThrottle):
    scope = "shipping_quote"


class CartQuoteView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ShippingQuoteThrottle]
    serializer_class = CartQuoteInputSerializer

    @extend_schema(
        request=CartQuoteInputSerializer,
        description="Quote couriers for the cart; the cheapest is selected automatically",
    )
    def post(self, request):
        serializer = CartQuoteInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        cart = cart_service.get_or_create_cart(request.user)
        try:
            quote = rate_service.quote_cart(
                cart,
                data["pincode"],
                pickup_pincode=data.get("pickup_pincode"),
                b2b=data["b2b"],
                payment_method=data["payment_method"],
            )
        except ShippingError as exc:
            return shipping_error_response(exc)

        cart.refresh_from_db()
        return Response(
            {
                "box": quote.box.as_dict(),
                "rates": quote.rates,
                "selected": quote.selected,
                "cart": CartSerializer(cart).data,
            }
        )


class CartSelectRateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SelectRateInputSerializer

    @extend_schema(
        request=SelectRateInputSerializer,
        responses={200: CartSerializer},
        description="Select a courier from the cart's latest quotes",
    )
    def post(self, request):
        serializer = SelectRateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = cart_service.get_or_create_cart(request.user)
        try:
            rate_service.select_rate(cart, serializer.validated_data["courier_id"])
        except ShippingError as exc:
            return shipping_error_response(exc)

        cart.refresh_from_db()
        return Response(CartSerializer(cart).data)


class ProductRateView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ShippingQuoteThrottle]
    serializer_class = ProductRateInputSerializer

    @extend_schema(request=ProductRateInputSerializer, description="Courier rates for one product")
    def post(self, request):
        serializer = ProductRateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = get_object_or_404(Product, id=data["product_id"])
        try:
            rates = rate_service.quote_product(product, data["quantity"], data["pincode"])
        except ShippingError as exc:
            return shipping_error_response(exc)

        return Response({"rates": rates, "cheapest": rates[0]})


class TrackingView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = TrackingQuerySerializer

    @extend_schema(parameters=[TrackingQuerySerializer], description="Track a shipment by AWB or LRN")
    def get(self, request):
        serializer = TrackingQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        try:
            data = bigship.get_tracking(
                serializer.validated_data["tracking_type"],
                serializer.validated_data["tracking_id"],
            )
        except ShippingError as exc:
            return shipping_error_response(exc)

        return Response(data)
