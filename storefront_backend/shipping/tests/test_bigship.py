# shipping/tests/test_bigship.py

"""
AGGREGATOR CLIENT TESTS

HTTP is never hit: `_send` is patched with canned envelopes, or `urlopen`
with HTTPErrors for the transport tests.
"""

import io
from unittest import mock
from urllib.error import HTTPError

from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from shipping.services import bigship
from shipping.services.exceptions import (
    BigShipAuthError,
    BigShipError,
    BigShipRateLimited,
    ShippingConfigError,
)


def _ok(data=None, message="ok"):
    return {"data": data, "success": True, "message": message, "responseCode": 200}


def _login(token="tok-1"):
    return _ok({"token": token})


class TokenTests(SimpleTestCase):
    """
    GUARANTEES:
    - one login per 12 hours, shared through the cache
    - a token inside the 5 minute margin is refreshed
    - a 401 clears the token and retries once
    """

    def setUp(self):
        cache.clear()

    def test_token_is_cached(self):
        with mock.patch.object(bigship, "_send", side_effect=[_login(), _ok("10"), _ok("20")]) as send:
            self.assertEqual(bigship.get_wallet_balance(), "10")
            self.assertEqual(bigship.get_wallet_balance(), "20")

        paths = [c.args[1] for c in send.call_args_list]
        self.assertEqual(paths.count("api/login/user"), 1)
        self.assertEqual(send.call_args_list[1].kwargs["token"], "tok-1")

    def test_token_refreshed_inside_margin(self):
        with mock.patch.object(bigship, "_now", return_value=1_000.0):
            with mock.patch.object(bigship, "_send", return_value=_login("old")):
                bigship.login()

        near_expiry = 1_000.0 + bigship.TOKEN_TTL_SECONDS - 60
        with mock.patch.object(bigship, "_now", return_value=near_expiry):
            with mock.patch.object(bigship, "_send", return_value=_login("new")):
                self.assertEqual(bigship.get_token(), "new")

    def test_401_retries_once_with_fresh_token(self):
        responses = [
            _login("stale"),
            BigShipAuthError("expired", status_code=401),
            _login("fresh"),
            _ok("55"),
        ]
        with mock.patch.object(bigship, "_send", side_effect=responses) as send:
            self.assertEqual(bigship.get_wallet_balance(), "55")

        self.assertEqual(send.call_args_list[-1].kwargs["token"], "fresh")

    def test_failed_login_raises(self):
        envelope = {"data": None, "success": False, "message": "Invalid access key", "responseCode": 400}
        with mock.patch.object(bigship, "_send", return_value=envelope):
            with self.assertRaisesMessage(BigShipError, "Invalid access key"):
                bigship.login()

    @override_settings(SHIPPING={"BIGSHIP": {"USERNAME": "", "PASSWORD": "", "ACCESS_KEY": ""}})
    def test_missing_credentials(self):
        with self.assertRaises(ShippingConfigError):
            bigship.login()


class EnvelopeTests(SimpleTestCase):
    def setUp(self):
        cache.clear()
        cache.set(
            bigship.TOKEN_CACHE_KEY,
            {"token": "tok", "expires_at": bigship._now() + bigship.TOKEN_TTL_SECONDS},
        )

    def test_success_false_raises_with_message(self):
        envelope = {"data": None, "success": False, "message": "Pincode not serviceable", "responseCode": 400}
        with mock.patch.object(bigship, "_send", return_value=envelope):
            with self.assertRaisesMessage(BigShipError, "Pincode not serviceable"):
                bigship.calculate_rates({"box_details": []})

    def test_calculator_payload_gets_placeholder_product(self):
        with mock.patch.object(bigship, "_send", return_value=_ok([])) as send:
            bigship.calculate_rates({"box_details": [{"box_count": 1}]})

        body = send.call_args.kwargs["body"]
        self.assertEqual(body["box_details"][0]["product_details"][0]["product_name"], "Sample Product")

    def test_tracking_tolerates_success_false_with_200(self):
        envelope = {"data": {"status": "In Transit"}, "success": False, "message": "", "responseCode": 200}
        with mock.patch.object(bigship, "_send", return_value=envelope):
            self.assertEqual(bigship.get_tracking("awb", "AWB1")["status"], "In Transit")

    def test_tracking_error_raises(self):
        envelope = {"data": None, "success": False, "message": "Not found", "responseCode": 404}
        with mock.patch.object(bigship, "_send", return_value=envelope):
            with self.assertRaises(BigShipError):
                bigship.get_tracking("awb", "AWB1")

    def test_query_params_are_encoded_into_path(self):
        with mock.patch.object(bigship, "_send", return_value=_ok([])) as send:
            bigship.get_shipping_rates("b2b", 42, "OwnerRisk")

        path = send.call_args.args[1]
        self.assertIn("system_order_id=42", path)
        self.assertIn("risk_type=OwnerRisk", path)

    def test_shipment_data_type_validated(self):
        with self.assertRaises(ValueError):
            bigship.get_shipment_data(4, 42)

    def test_parse_system_order_id(self):
        self.assertEqual(bigship.parse_system_order_id("Order Created Successfully, Order ID: 12345"), 12345)
        self.assertIsNone(bigship.parse_system_order_id("Order Created"))

    def test_single_order_create_and_manifest(self):
        created = _ok("Order Created Successfully, Order ID: 777")
        with mock.patch.object(bigship, "_send", side_effect=[created, _ok(None)]) as send:
            message = bigship.add_single_order({"shipment_category": "b2c"})
            bigship.manifest_single_order(bigship.parse_system_order_id(message))

        self.assertEqual(send.call_args_list[0].args[:2], ("POST", "api/order/add/single"))
        self.assertEqual(send.call_args_list[1].args[:2], ("POST", "api/order/manifest/single"))
        self.assertEqual(send.call_args_list[1].kwargs["body"], {"system_order_id": 777})


class TransportTests(SimpleTestCase):
    """HTTP errors from urlopen map onto the BigShip exception types."""

    def _http_error(self, code, body=b""):
        return HTTPError("https://api.bigship.in/x", code, "error", {}, io.BytesIO(body))

    def test_429_is_logged_and_raised(self):
        error = self._http_error(429, b'{"message": "Too many requests"}')
        with mock.patch.object(bigship, "urlopen", side_effect=error):
            with self.assertLogs("shipping.services.bigship", level="WARNING") as logs:
                with self.assertRaises(BigShipRateLimited) as ctx:
                    bigship._send("GET", "api/courier/get/all", token="tok")

        self.assertEqual(ctx.exception.status_code, 429)
        self.assertIn("rate limit", logs.output[0])

    def test_other_http_errors_carry_the_message(self):
        error = self._http_error(500, b'{"message": "Server exploded"}')
        with mock.patch.object(bigship, "urlopen", side_effect=error):
            with self.assertRaisesMessage(BigShipError, "500 Server exploded"):
                bigship._send("GET", "api/courier/get/all")
