# shipping/views/heavy_orders.py

"""
HEAVY ORDER VIEWS

Buyer-owned B2B freight orders. Each step maps to one service call:
draft -> (advance paid via payments app) -> submit -> rates -> manifest -> documents / track
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shipping.serializers import (
    HeavyOrderCreateSerializer,
    HeavyOrderSerializer,
    ManifestInputSerializer,
)
from shipping.services import heavy_order_service
from shipping.services.exceptions import ShippingError
from shipping.views.errors import shipping_error_response


class _HeavyOrderActionView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HeavyOrderSerializer

    def _get(self, request, heavy_order_id):
        return heavy_order_service.get_heavy_order(user=request.user, heavy_order_id=heavy_order_id)


class HeavyOrderListCreateView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = HeavyOrderSerializer

    @extend_schema(responses={200: HeavyOrderSerializer(many=True)})
    def get(self, request):
        orders = heavy_order_service.list_user_heavy_orders(request.user)
        return Response(HeavyOrderSerializer(orders, many=True).data)

    @extend_schema(
        request=HeavyOrderCreateSerializer,
        responses={201: HeavyOrderSerializer},
        description="Draft a heavy order; the advance is half the total, the rest is COD",
    )
    def post(self, request):
        serializer = HeavyOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        heavy_order = heavy_order_service.create_heavy_order(user=request.user, data=serializer.validated_data)
        return Response(HeavyOrderSerializer(heavy_order).data, status=status.HTTP_201_CREATED)


class HeavyOrderDetailView(_HeavyOrderActionView):
    @extend_schema(responses={200: HeavyOrderSerializer})
    def get(self, request, heavy_order_id):
        try:
            heavy_order = self._get(request, heavy_order_id)
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response(HeavyOrderSerializer(heavy_order).data)


class HeavyOrderSubmitView(_HeavyOrderActionView):
    @extend_schema(request=None, responses={200: HeavyOrderSerializer}, description="Create at the aggregator")
    def post(self, request, heavy_order_id):
        try:
            heavy_order = heavy_order_service.create_at_aggregator(self._get(request, heavy_order_id))
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response(HeavyOrderSerializer(heavy_order).data)


class HeavyOrderRatesView(_HeavyOrderActionView):
    @extend_schema(description="B2B courier rates (owner risk)")
    def get(self, request, heavy_order_id):
        try:
            rates = heavy_order_service.list_rates(self._get(request, heavy_order_id))
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response({"rates": rates})


class HeavyOrderManifestView(_HeavyOrderActionView):
    @extend_schema(request=ManifestInputSerializer, responses={200: HeavyOrderSerializer})
    def post(self, request, heavy_order_id):
        serializer = ManifestInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            heavy_order = heavy_order_service.manifest(
                self._get(request, heavy_order_id),
                serializer.validated_data["courier_id"],
            )
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response(HeavyOrderSerializer(heavy_order).data)


class HeavyOrderDocumentView(_HeavyOrderActionView):
    @extend_schema(description="1 = AWB, 2 = label, 3 = manifest")
    def get(self, request, heavy_order_id, document_type):
        try:
            data = heavy_order_service.fetch_document(self._get(request, heavy_order_id), document_type)
        except ValueError as exc:
            return shipping_error_response(ShippingError(str(exc)))
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response({"document_type": document_type, "data": data})


class HeavyOrderTrackView(_HeavyOrderActionView):
    def get(self, request, heavy_order_id):
        try:
            data = heavy_order_service.track(self._get(request, heavy_order_id))
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response(data)


class HeavyOrderCancelView(_HeavyOrderActionView):
    @extend_schema(request=None, responses={200: HeavyOrderSerializer})
    def post(self, request, heavy_order_id):
        try:
            heavy_order = heavy_order_service.cancel(self._get(request, heavy_order_id))
        except ShippingError as exc:
            return shipping_error_response(exc)
        return Response(HeavyOrderSerializer(heavy_order).data)
