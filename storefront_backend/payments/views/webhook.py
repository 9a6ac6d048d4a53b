# payments/views/webhook.py

"""
RAZORPAY WEBHOOK

Reconciles captures the client never confirmed (closed tab, dropped
network). Signed with the webhook secret over the raw body.

The gateway retries anything that is not 2xx: business outcomes
(duplicate, unknown order, amount mismatch) answer 200, a failed
gateway lookup answers 502.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from orders.services.exceptions import OrderError
from payments.services import payment_service, razorpay
from payments.services.exceptions import PaymentError, RazorpayError

logger = logging.getLogger(__name__)


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class RazorpayWebhookView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    parser_classes = [JSONParser]
    throttle_classes = [WebhookThrottle]

    def post(self, request, *args, **kwargs):
        raw_body = getattr(request, "body", b"") or b""
        signature = request.headers.get("x-razorpay-signature")

        logger.info("Razorpay webhook received")

        if not razorpay.verify_webhook_signature(raw_body=raw_body, signature=signature):
            logger.warning("Invalid Razorpay signature")
            return Response({"ok": False, "detail": "Invalid signature"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            outcome = payment_service.handle_webhook_event(request.data or {})
        except RazorpayError:
            logger.exception("Gateway lookup failed during webhook")
            return Response({"ok": False, "detail": "Gateway unavailable"}, status=status.HTTP_502_BAD_GATEWAY)
        except (PaymentError, OrderError) as exc:
            logger.warning("Webhook not applied", extra={"reason": str(exc)})
            return Response({"ok": True, "detail": str(exc)}, status=status.HTTP_200_OK)

        logger.info("Webhook handled", extra={"outcome": outcome})
        return Response({"ok": True, "detail": outcome}, status=status.HTTP_200_OK)
