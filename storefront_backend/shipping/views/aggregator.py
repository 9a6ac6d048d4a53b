# shipping/views/aggregator.py

"""
Admin-only passthroughs to the aggregator account (couriers, wallet, warehouses).
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from shipping.serializers import WarehouseInputSerializer
from shipping.services import bigship
from shipping.services.estimator import SHIPMENT_B2B, SHIPMENT_B2C
from shipping.services.exceptions import ShippingError
from shipping.views.errors import shipping_error_response
from users.permissions import IsAdmin

SHIPMENT_CATEGORIES = {SHIPMENT_B2C, SHIPMENT_B2B}


def _shipment_category(request):
    value = (request.query_params.get("shipment_category") or SHIPMENT_B2C).strip().lower()
    return value if value in SHIPMENT_CATEGORIES else None


def _invalid_category():
    return error_response(
        code="INVALID_SHIPMENT_CATEGORY",
        message="shipment_category must be 'b2c' or 'b2b'",
        http_status=status.HTTP_400_BAD_REQUEST,
    )


class CourierListView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        category = _shipment_category(request)
        if category is None:
            return _invalid_category()
        try:
            return Response(bigship.get_courier_list(category))
        except ShippingError as exc:
            return shipping_error_response(exc)


class PaymentCategoryListView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        category = _shipment_category(request)
        if category is None:
            return _invalid_category()
        try:
            return Response(bigship.get_payment_categories(category))
        except ShippingError as exc:
            return shipping_error_response(exc)


class WalletBalanceView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        try:
            return Response({"balance": bigship.get_wallet_balance()})
        except ShippingError as exc:
            return shipping_error_response(exc)


class WarehouseView(APIView):
    permission_classes = [IsAdmin]
    serializer_class = WarehouseInputSerializer

    def get(self, request):
        try:
            page_index = int(request.query_params.get("page_index") or 1)
            page_size = int(request.query_params.get("page_size") or 10)
        except ValueError:
            return error_response(
                code="INVALID_PAGINATION",
                message="page_index and page_size must be integers",
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            return Response(bigship.get_warehouse_list(page_index=page_index, page_size=page_size))
        except ShippingError as exc:
            return shipping_error_response(exc)

    @extend_schema(request=WarehouseInputSerializer)
    def post(self, request):
        serializer = WarehouseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            data = bigship.add_warehouse(serializer.to_aggregator())
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response(data, status=status.HTTP_201_CREATED)
