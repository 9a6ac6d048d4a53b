# payments/views/payment.py

"""
SPLIT PAYMENT VIEWS

Each order payment step is two calls:
- POST .../init/     -> checkout options for the gateway widget
- POST .../confirm/  -> signed gateway response, verified server-side
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.api_errors import error_response
from orders.models import Order
from orders.serializers import OrderSerializer
from orders.services.exceptions import OrderError
from payments.serializers import (
    CheckoutOptionsSerializer,
    ConfirmPaymentInputSerializer,
    FailPaymentInputSerializer,
    PaymentSerializer,
)
from payments.services import payment_service
from payments.services.exceptions import PaymentError
from payments.views.errors import payment_error_response
from shipping.serializers import HeavyOrderSerializer
from shipping.services import heavy_order_service
from shipping.services.exceptions import HeavyOrderNotFound, ShippingError
from shipping.views.errors import shipping_error_response


class _OrderPaymentView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_order(self, request, order_id):
        return Order.objects.filter(id=order_id, user=request.user).first()

    def _not_found(self):
        return error_response(
            code="ORDER_NOT_FOUND",
            message="Order not found",
            http_status=status.HTTP_404_NOT_FOUND,
        )

    def _confirm_payload(self, request):
        serializer = ConfirmPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data


class AdvancePaymentInitView(_OrderPaymentView):
    @extend_schema(request=None, responses={200: CheckoutOptionsSerializer})
    def post(self, request, order_id):
        order = self._get_order(request, order_id)
        if order is None:
            return self._not_found()

        try:
            options = payment_service.initialize_advance_payment(user=request.user, order=order)
        except PaymentError as exc:
            return payment_error_response(exc)

        return Response(options)


class AdvancePaymentConfirmView(_OrderPaymentView):
    @extend_schema(request=ConfirmPaymentInputSerializer, responses={200: OrderSerializer})
    def post(self, request, order_id):
        order = self._get_order(request, order_id)
        if order is None:
            return self._not_found()

        payload = self._confirm_payload(request)
        try:
            order = payment_service.confirm_advance_payment(user=request.user, order=order, payload=payload)
        except (PaymentError, OrderError) as exc:
            return payment_error_response(exc)

        return Response(OrderSerializer(order).data)


class RemainingPaymentInitView(_OrderPaymentView):
    @extend_schema(request=None, responses={200: CheckoutOptionsSerializer})
    def post(self, request, order_id):
        order = self._get_order(request, order_id)
        if order is None:
            return self._not_found()

        try:
            options = payment_service.initialize_remaining_payment(user=request.user, order=order)
        except PaymentError as exc:
            return payment_error_response(exc)

        return Response(options)


class RemainingPaymentConfirmView(_OrderPaymentView):
    @extend_schema(request=ConfirmPaymentInputSerializer, responses={200: OrderSerializer})
    def post(self, request, order_id):
        order = self._get_order(request, order_id)
        if order is None:
            return self._not_found()

        payload = self._confirm_payload(request)
        try:
            order = payment_service.confirm_remaining_payment(user=request.user, order=order, payload=payload)
        except PaymentError as exc:
            return payment_error_response(exc)

        return Response(OrderSerializer(order).data)


class PaymentFailedView(_OrderPaymentView):
    @extend_schema(
        request=FailPaymentInputSerializer,
        responses={200: OrderSerializer},
        description="Client reports a failed or dismissed checkout",
    )
    def post(self, request, order_id):
        order = self._get_order(request, order_id)
        if order is None:
            return self._not_found()

        serializer = FailPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = payment_service.fail_payment(
                user=request.user,
                order=order,
                error=serializer.validated_data.get("error", ""),
            )
        except (PaymentError, OrderError) as exc:
            return payment_error_response(exc)

        return Response(OrderSerializer(order).data)


class HeavyOrderAdvanceInitView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: CheckoutOptionsSerializer})
    def post(self, request, heavy_order_id):
        try:
            heavy_order = heavy_order_service.get_heavy_order(user=request.user, heavy_order_id=heavy_order_id)
            options = payment_service.initialize_heavy_order_advance(user=request.user, heavy_order=heavy_order)
        except HeavyOrderNotFound as exc:
            return shipping_error_response(exc)
        except PaymentError as exc:
            return payment_error_response(exc)

        return Response(options)


class HeavyOrderAdvanceConfirmView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=ConfirmPaymentInputSerializer, responses={200: HeavyOrderSerializer})
    def post(self, request, heavy_order_id):
        serializer = ConfirmPaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            heavy_order = heavy_order_service.get_heavy_order(user=request.user, heavy_order_id=heavy_order_id)
            heavy_order = payment_service.confirm_heavy_order_advance(
                user=request.user,
                heavy_order=heavy_order,
                payload=serializer.validated_data,
            )
        except ShippingError as exc:
            return shipping_error_response(exc)
        except PaymentError as exc:
            return payment_error_response(exc)

        return Response(HeavyOrderSerializer(heavy_order).data)


class MyPaymentsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: PaymentSerializer(many=True)})
    def get(self, request):
        payments = request.user.payments.all().order_by("-created_at")
        return Response(PaymentSerializer(payments, many=True).data)
