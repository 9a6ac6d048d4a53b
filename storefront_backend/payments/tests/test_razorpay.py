# payments/tests/test_razorpay.py

"""
GATEWAY CLIENT TESTS

HTTP is never hit: `_request_json` is patched.
"""

import hashlib
import hmac
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase, override_settings

from payments.services import razorpay
from payments.services.exceptions import RazorpayConfigError, RazorpayError


class RazorpayClientTests(SimpleTestCase):
    def test_to_paise_rounds_half_up(self):
        self.assertEqual(razorpay.to_paise(Decimal("375.00")), 37500)
        self.assertEqual(razorpay.to_paise("10.005"), 1001)
        with self.assertRaises(ValueError):
            razorpay.to_paise("ten")

    def test_payment_signature(self):
        signature = hmac.new(b"rzp_test_secret", b"order_1|pay_1", hashlib.sha256).hexdigest()

        self.assertTrue(razorpay.verify_payment_signature(order_id="order_1", payment_id="pay_1", signature=signature))
        self.assertFalse(razorpay.verify_payment_signature(order_id="order_1", payment_id="pay_2", signature=signature))
        self.assertFalse(razorpay.verify_payment_signature(order_id="order_1", payment_id="pay_1", signature=""))

    def test_webhook_signature(self):
        body = b'{"event":"payment.captured"}'
        signature = hmac.new(b"rzp_webhook_secret", body, hashlib.sha256).hexdigest()

        self.assertTrue(razorpay.verify_webhook_signature(raw_body=body, signature=signature))
        self.assertFalse(razorpay.verify_webhook_signature(raw_body=body + b" ", signature=signature))
        self.assertFalse(razorpay.verify_webhook_signature(raw_body=body, signature=None))

    def test_create_order_payload(self):
        with mock.patch.object(razorpay, "_request_json", return_value={"id": "order_1"}) as request_json:
            order = razorpay.create_order(amount=Decimal("99.50"), currency="INR", receipt="R" * 60)

        self.assertEqual(order["id"], "order_1")
        body = request_json.call_args.kwargs["body"]
        self.assertEqual(body["amount"], 9950)
        self.assertEqual(len(body["receipt"]), 40)
        self.assertEqual(body["notes"], {})

    def test_create_order_without_id_raises(self):
        with mock.patch.object(razorpay, "_request_json", return_value={"error": "nope"}):
            with self.assertRaises(RazorpayError):
                razorpay.create_order(amount=1, currency="INR", receipt="R1")

    @override_settings(PAYMENTS={"RAZORPAY": {"KEY_ID": "", "KEY_SECRET": "", "WEBHOOK_SECRET": ""}})
    def test_missing_credentials_fail_closed(self):
        with self.assertRaises(RazorpayConfigError):
            razorpay.get_key_id()
        with self.assertRaises(RazorpayConfigError):
            razorpay.verify_payment_signature(order_id="o", payment_id="p", signature="s")
