# payments/tests/test_payments.py

"""
SPLIT PAYMENT TESTS

The gateway HTTP call is patched; signatures are computed with the
test-settings secrets exactly as the gateway would sign them.

Run with:
    python manage.py test payments -v 2
"""

from __future__ import annotations

import hashlib
import hmac
import json
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.conf import settings
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from bidding.models import BidOffer
from bidding.services import bid_service
from cart.services import cart_service
from orders.models import Order
from orders.services import checkout_orchestrator
from payments.models import Payment
from payments.services import payment_service
from payments.services.exceptions import (
    PaymentPermissionError,
    PaymentStateError,
    PaymentVerificationError,
    RazorpayError,
)
from products.models import Product
from shipping.models import HeavyOrder
from shipping.services import heavy_order_service
from shipping.tests.test_shipping_services import heavy_order_data
from users.models import User


def _sign(message: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def signed_payload(gateway_order_id="order_GW1", payment_id="pay_1"):
    secret = settings.PAYMENTS["RAZORPAY"]["KEY_SECRET"]
    return {
        "razorpay_order_id": gateway_order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": _sign(f"{gateway_order_id}|{payment_id}", secret),
    }


def gateway_order(**kwargs):
    return {"id": "order_GW1", "status": "created", **kwargs}


class PaymentBase(TestCase):
    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(
            email="buyer@example.com", password="pass-1234", display_name="Ravi", phone="9876543210"
        )
        self.stranger = User.objects.create_user(email="stranger@example.com", password="pass-1234")

        self.tea = Product.objects.create(
            owner=self.seller,
            name="Assam Tea",
            base_price=Decimal("300.00"),
            discount_price=Decimal("250.00"),
            stock_quantity=100,
        )
        self.cart = cart_service.get_or_create_cart(self.buyer)

    def _cart_order(self, quantity=3):
        cart_service.add_item(self.cart, self.tea, quantity)
        return checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)

    def _bid_order(self):
        bid = bid_service.create_bid(
            seller=self.seller,
            product=self.tea,
            data={"base_price": Decimal("280.00"), "end_time": timezone.now() + timedelta(days=1)},
        )
        offer = bid_service.submit_offer(buyer=self.buyer, bid=bid, bid_amount=Decimal("95.00"), quantity=10)
        return checkout_orchestrator.create_bid_order(user=self.buyer, offer=offer)


class AdvanceAmountTests(TestCase):
    def test_advance_is_rounded_up_to_whole_rupees(self):
        self.assertEqual(payment_service.compute_advance(Decimal("750.00")), Decimal("375.00"))
        self.assertEqual(payment_service.compute_advance(Decimal("999.99")), Decimal("500.00"))
        self.assertEqual(payment_service.compute_advance(Decimal("1.00")), Decimal("1.00"))


# ============================================================
# ORDER ADVANCE + REMAINING
# ============================================================


@mock.patch("payments.services.razorpay._request_json")
class OrderPaymentServiceTests(PaymentBase):
    """
    GUARANTEES:
    - init opens a gateway order for the advance and returns checkout options
    - confirm verifies the signature and moves the order to processing / partial
    - confirming the same payment twice records it once
    - the cart is cleared only after the advance is captured
    - the remaining payment completes the order
    """

    def test_initialize_advance_returns_checkout_options(self, request_json):
        request_json.return_value = gateway_order(amount=37500)
        order = self._cart_order()

        options = payment_service.initialize_advance_payment(user=self.buyer, order=order)

        method, path = request_json.call_args.args
        body = request_json.call_args.kwargs["body"]
        self.assertEqual((method, path), ("POST", "orders"))
        self.assertEqual(body["amount"], 37500)
        self.assertEqual(body["notes"], {"order_id": str(order.id), "kind": "advance"})

        self.assertEqual(options["key"], settings.PAYMENTS["RAZORPAY"]["KEY_ID"])
        self.assertEqual(options["amount"], 37500)
        self.assertEqual(options["currency"], "INR")
        self.assertEqual(options["order_id"], "order_GW1")
        self.assertEqual(options["prefill"]["contact"], "9876543210")
        self.assertEqual(options["prefill"]["name"], "Ravi")

    def test_initialize_advance_owner_only(self, request_json):
        order = self._cart_order()
        with self.assertRaises(PaymentPermissionError):
            payment_service.initialize_advance_payment(user=self.stranger, order=order)
        request_json.assert_not_called()

    def test_confirm_advance(self, request_json):
        order = self._cart_order()

        order = payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=signed_payload())

        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.payment_status, Order.PAYMENT_PARTIAL)
        self.assertEqual(order.paid_amount, Decimal("375.00"))
        self.assertEqual(order.remaining_amount, Decimal("375.00"))
        self.assertIsNotNone(order.paid_at)
        self.assertEqual(cart_service.item_count(self.cart), 0)

        payment = Payment.objects.get()
        self.assertEqual(payment.kind, Payment.KIND_ADVANCE)
        self.assertEqual(payment.payment_id, "pay_1")

    def test_confirm_advance_is_idempotent(self, request_json):
        order = self._cart_order()
        payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=signed_payload())
        order = payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=signed_payload())

        self.assertEqual(Payment.objects.count(), 1)
        self.assertEqual(order.paid_amount, Decimal("375.00"))

    def test_bad_signature_leaves_order_pending(self, request_json):
        order = self._cart_order()
        payload = signed_payload()
        payload["razorpay_signature"] = "0" * 64

        with self.assertRaises(PaymentVerificationError):
            payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=payload)

        order.refresh_from_db()
        self.assertEqual(order.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(cart_service.item_count(self.cart), 3)

    def test_bid_order_advance_accepts_offer_and_keeps_cart(self, request_json):
        cart_service.add_item(self.cart, self.tea, 1)
        order = self._bid_order()

        payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=signed_payload())

        order.bid_offer.refresh_from_db()
        self.assertEqual(order.bid_offer.status, BidOffer.STATUS_ACCEPTED)
        self.assertEqual(cart_service.item_count(self.cart), 1)

    def test_remaining_payment(self, request_json):
        request_json.return_value = gateway_order(id="order_GW2")
        order = self._cart_order()

        with self.assertRaises(PaymentStateError):
            payment_service.initialize_remaining_payment(user=self.buyer, order=order)

        order = payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=signed_payload())
        options = payment_service.initialize_remaining_payment(user=self.buyer, order=order)
        self.assertEqual(options["amount"], 37500)

        order = payment_service.confirm_remaining_payment(
            user=self.buyer,
            order=order,
            payload=signed_payload(gateway_order_id="order_GW2", payment_id="pay_2"),
        )
        self.assertEqual(order.payment_status, Order.PAYMENT_COMPLETED)
        self.assertEqual(order.paid_amount, order.total_amount)
        self.assertEqual(order.remaining_amount, Decimal("0.00"))
        self.assertEqual(Payment.objects.filter(kind=Payment.KIND_REMAINING).count(), 1)

    def test_fail_first_payment_cancels_order(self, request_json):
        order = self._cart_order()

        order = payment_service.fail_payment(user=self.buyer, order=order, error="Card declined")

        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(order.payment_status, Order.PAYMENT_FAILED)
        self.assertEqual(order.payment_error, "Card declined")
        self.assertEqual(Payment.objects.get().status, Payment.STATUS_FAILED)
        self.assertEqual(cart_service.item_count(self.cart), 3)

    def test_fail_remaining_payment_keeps_order(self, request_json):
        order = self._cart_order()
        payment_service.confirm_advance_payment(user=self.buyer, order=order, payload=signed_payload())

        order = payment_service.fail_payment(user=self.buyer, order=order, error="Timeout")

        self.assertEqual(order.status, Order.STATUS_PROCESSING)
        self.assertEqual(order.payment_status, Order.PAYMENT_PARTIAL)
        self.assertEqual(order.payment_error, "Timeout")


# ============================================================
# HEAVY ORDER ADVANCE
# ============================================================


@mock.patch("payments.services.razorpay._request_json")
class HeavyOrderPaymentTests(PaymentBase):
    def setUp(self):
        super().setUp()
        self.heavy_order = heavy_order_service.create_heavy_order(user=self.buyer, data=heavy_order_data())

    def test_initialize_for_advance_amount(self, request_json):
        request_json.return_value = gateway_order()

        options = payment_service.initialize_heavy_order_advance(user=self.buyer, heavy_order=self.heavy_order)

        self.assertEqual(options["amount"], payment_service.razorpay.to_paise(self.heavy_order.advance_amount))
        self.assertEqual(request_json.call_args.kwargs["body"]["notes"]["heavy_order_id"], str(self.heavy_order.id))

    def test_confirm_marks_advance_paid(self, request_json):
        heavy_order = payment_service.confirm_heavy_order_advance(
            user=self.buyer, heavy_order=self.heavy_order, payload=signed_payload()
        )

        self.assertEqual(heavy_order.status, HeavyOrder.STATUS_ADVANCE_PAID)
        self.assertEqual(Payment.objects.get().heavy_order_id, self.heavy_order.id)

        with self.assertRaises(PaymentStateError):
            payment_service.initialize_heavy_order_advance(user=self.buyer, heavy_order=heavy_order)


# ============================================================
# API
# ============================================================


@mock.patch("payments.services.razorpay._request_json")
class PaymentApiTests(PaymentBase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.client.force_authenticate(self.buyer)
        self.order = self._cart_order()

    def test_requires_authentication(self, request_json):
        response = APIClient().post(reverse("payments:advance-init", args=[self.order.id]))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_other_users_order_is_not_found(self, request_json):
        self.client.force_authenticate(self.stranger)
        response = self.client.post(reverse("payments:advance-init", args=[self.order.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"]["code"], "ORDER_NOT_FOUND")

    def test_advance_init_and_confirm(self, request_json):
        request_json.return_value = gateway_order()

        response = self.client.post(reverse("payments:advance-init", args=[self.order.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["order_id"], "order_GW1")

        response = self.client.post(
            reverse("payments:advance-confirm", args=[self.order.id]), signed_payload(), format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["payment_status"], "partial")

        response = self.client.get(reverse("payments:my-payments"))
        self.assertEqual(len(response.data), 1)

    def test_bad_signature_is_rejected(self, request_json):
        payload = signed_payload()
        payload["razorpay_signature"] = "bad"

        response = self.client.post(reverse("payments:advance-confirm", args=[self.order.id]), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "PAYMENT_VERIFICATION_FAILED")

    def test_gateway_error_maps_to_502(self, request_json):
        request_json.side_effect = RazorpayError("Razorpay HTTPError: 500 boom", status_code=500)

        response = self.client.post(reverse("payments:advance-init", args=[self.order.id]))

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["error"]["code"], "PAYMENT_PROVIDER_ERROR")

    def test_remaining_before_advance_conflicts(self, request_json):
        response = self.client.post(reverse("payments:remaining-init", args=[self.order.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_failed_endpoint(self, request_json):
        response = self.client.post(
            reverse("payments:payment-failed", args=[self.order.id]), {"error": "Dismissed"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "cancelled")


# ============================================================
# WEBHOOK
# ============================================================


class WebhookTests(PaymentBase):
    """
    GUARANTEES:
    - unsigned or mis-signed bodies are rejected
    - payment.captured is re-checked with the gateway, then reconciles an
      unconfirmed advance
    - duplicates and amount mismatches answer 200 without side effects
    - remaining and heavy-order advance captures reconcile the same way
    """

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.order = self._cart_order()
        self.url = reverse("payments:razorpay-webhook")

        patcher = mock.patch("payments.services.razorpay._request_json")
        self.request_json = patcher.start()
        self.addCleanup(patcher.stop)
        self.request_json.return_value = {"id": "pay_W1", "status": "captured", "amount": 37500}

    def _event(self, *, amount=37500, payment_id="pay_W1", kind="advance", notes=None):
        return {
            "event": "payment.captured",
            "payload": {
                "payment": {
                    "entity": {
                        "id": payment_id,
                        "order_id": "order_GW1",
                        "amount": amount,
                        "notes": notes or {"order_id": str(self.order.id), "kind": kind},
                    }
                }
            },
        }

    def _post(self, event, signature=None):
        body = json.dumps(event).encode("utf-8")
        secret = settings.PAYMENTS["RAZORPAY"]["WEBHOOK_SECRET"]
        signature = signature or hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
        return self.client.post(
            self.url,
            data=body,
            content_type="application/json",
            HTTP_X_RAZORPAY_SIGNATURE=signature,
        )

    def test_invalid_signature(self):
        response = self._post(self._event(), signature="nope")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_captured_event_applies_advance(self):
        response = self._post(self._event())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["detail"], "processed")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PARTIAL)

        response = self._post(self._event())
        self.assertEqual(response.data["detail"], "duplicate")
        self.assertEqual(Payment.objects.count(), 1)

    def test_captured_event_fetches_payment(self):
        self._post(self._event())
        self.assertEqual(self.request_json.call_args.args, ("GET", "payments/pay_W1"))

    def test_not_captured_at_gateway(self):
        self.request_json.return_value = {"id": "pay_W1", "status": "authorized", "amount": 37500}

        response = self._post(self._event())

        self.assertEqual(response.data["detail"], "not_captured")
        self.assertFalse(Payment.objects.exists())

    def test_amount_mismatch_is_not_applied(self):
        self.request_json.return_value = {"id": "pay_W1", "status": "captured", "amount": 100}

        response = self._post(self._event(amount=100))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PENDING)
        self.assertFalse(Payment.objects.exists())

    def test_captured_event_completes_remaining(self):
        self._post(self._event())
        self.request_json.return_value = {"id": "pay_W2", "status": "captured", "amount": 37500}

        response = self._post(self._event(payment_id="pay_W2", kind="remaining"))

        self.assertEqual(response.data["detail"], "processed")
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_COMPLETED)
        self.assertEqual(self.order.remaining_amount, Decimal("0.00"))
        self.assertEqual(
            Payment.objects.get(payment_id="pay_W2").kind, Payment.KIND_REMAINING
        )

    def test_captured_event_pays_heavy_order_advance(self):
        heavy_order = heavy_order_service.create_heavy_order(user=self.buyer, data=heavy_order_data())
        paise = payment_service.razorpay.to_paise(heavy_order.advance_amount)
        self.request_json.return_value = {"id": "pay_H1", "status": "captured", "amount": paise}

        response = self._post(
            self._event(payment_id="pay_H1", amount=paise, notes={"heavy_order_id": str(heavy_order.id)})
        )

        self.assertEqual(response.data["detail"], "processed")
        heavy_order.refresh_from_db()
        self.assertEqual(heavy_order.status, HeavyOrder.STATUS_ADVANCE_PAID)
        self.assertEqual(Payment.objects.get().heavy_order_id, heavy_order.id)

    def test_other_events_are_ignored(self):
        response = self._post({"event": "payment.failed", "payload": {}})
        self.assertEqual(response.data["detail"], "ignored")
