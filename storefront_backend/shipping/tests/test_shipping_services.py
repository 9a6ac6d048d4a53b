# shipping/tests/test_shipping_services.py

"""
CART QUOTE + HEAVY ORDER SERVICE TESTS

Run with:
    python manage.py test shipping -v 2
"""

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.test import TestCase

from cart.services import cart_service
from products.models import Product
from shipping.models import HeavyOrder
from shipping.services import bigship, heavy_order_service, rate_service
from shipping.services.exceptions import (
    EmptyShipmentError,
    HeavyOrderError,
    HeavyOrderNotFound,
    InvalidHeavyOrderTransition,
    NoRatesAvailable,
    ShippingSelectionError,
)
from users.models import User

RATES = [
    {"courier_id": 11, "courier_name": "Xpress", "tat": 5, "total_shipping_charges": 120.0},
    {"courier_id": 7, "courier_name": "Delhivery", "tat": 3, "total_shipping_charges": 80.0},
]


def heavy_order_data(**overrides):
    data = {
        "invoice_id": "INV-1001",
        "warehouse_id": 9,
        "first_name": "Asha",
        "last_name": "Verma",
        "phone": "9876543210",
        "address_line1": "12 MG Road",
        "pincode": "560001",
        "products": [
            {"name": "Steel rack", "category": "Others", "quantity": 2, "weight": 25, "length": 90, "width": 40, "height": 180}
        ],
        "total_amount": Decimal("10001.00"),
        "invoice_document_file": "https://files.example.com/inv-1001.pdf",
    }
    data.update(overrides)
    return data


class CartQuoteTests(TestCase):
    """
    GUARANTEES:
    - quotes are stored cheapest first and the cheapest is applied
    - only a quoted courier can be selected
    - changing cart contents drops the selection
    """

    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")
        self.product = Product.objects.create(
            owner=self.seller,
            name="Kettle",
            base_price=Decimal("500.00"),
            weight_kg=Decimal("1.20"),
        )
        self.cart = cart_service.get_or_create_cart(self.buyer)

    def test_empty_cart_cannot_be_quoted(self):
        with self.assertRaises(EmptyShipmentError):
            rate_service.quote_cart(self.cart, "560001")

    def test_quote_applies_cheapest(self):
        cart_service.add_item(self.cart, self.product, 2)

        with mock.patch.object(bigship, "calculate_rates", return_value=RATES) as calc:
            quote = rate_service.quote_cart(self.cart, "560001")

        payload = calc.call_args.args[0]
        self.assertEqual(payload["destination_pincode"], 560001)
        self.assertEqual(payload["pickup_pincode"], 110001)
        self.assertEqual(payload["box_details"][0]["each_box_dead_weight"], 2.4)

        self.assertEqual(quote.selected["courier_id"], 7)
        self.assertEqual(quote.selected["delivery_days_max"], 5)

        self.cart.refresh_from_db()
        self.assertEqual(self.cart.courier_id, 7)
        self.assertEqual(self.cart.shipping_cost, Decimal("80.00"))
        self.assertEqual(self.cart.shipping_pincode, "560001")
        self.assertEqual([q["courier_id"] for q in self.cart.shipping_quotes], [7, 11])

    def test_no_rates(self):
        cart_service.add_item(self.cart, self.product, 1)

        with mock.patch.object(bigship, "calculate_rates", return_value=[]):
            with self.assertRaises(NoRatesAvailable):
                rate_service.quote_cart(self.cart, "560001")

    def test_select_quoted_courier_only(self):
        cart_service.add_item(self.cart, self.product, 1)
        with mock.patch.object(bigship, "calculate_rates", return_value=RATES):
            rate_service.quote_cart(self.cart, "560001")

        rate_service.select_rate(self.cart, 11)
        self.cart.refresh_from_db()
        self.assertEqual(self.cart.shipping_cost, Decimal("120.00"))

        with self.assertRaises(ShippingSelectionError):
            rate_service.select_rate(self.cart, 999)

    def test_cart_change_drops_selection(self):
        cart_service.add_item(self.cart, self.product, 1)
        with mock.patch.object(bigship, "calculate_rates", return_value=RATES):
            rate_service.quote_cart(self.cart, "560001")

        cart_service.add_item(self.cart, self.product, 1)
        self.cart.refresh_from_db()

        self.assertIsNone(self.cart.courier_id)
        self.assertFalse(self.cart.has_shipping_selection)


class HeavyOrderServiceTests(TestCase):
    """
    GUARANTEES:
    - advance + COD always equals the total
    - the aggregator order is only created after the advance is paid
    - documents store the AWB; cancel voids it at the aggregator
    - state changes re-read the row under lock, so a stale copy cannot resubmit
    """

    def setUp(self):
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")
        self.other = User.objects.create_user(email="other@example.com", password="pass-1234")
        self.heavy_order = heavy_order_service.create_heavy_order(user=self.buyer, data=heavy_order_data())

    def test_split(self):
        self.assertEqual(self.heavy_order.advance_amount, Decimal("5000.50"))
        self.assertEqual(self.heavy_order.cod_amount, Decimal("5000.50"))
        self.assertEqual(self.heavy_order.status, HeavyOrder.STATUS_DRAFT)

    def test_owner_scoped_lookup(self):
        with self.assertRaises(HeavyOrderNotFound):
            heavy_order_service.get_heavy_order(user=self.other, heavy_order_id=self.heavy_order.id)

    def test_cannot_submit_before_advance(self):
        with mock.patch.object(bigship, "add_heavy_order") as add:
            with self.assertRaises(InvalidHeavyOrderTransition):
                heavy_order_service.create_at_aggregator(self.heavy_order)
        add.assert_not_called()

    def test_advance_payment_is_idempotent(self):
        heavy_order_service.record_advance_payment(self.heavy_order)
        again = heavy_order_service.record_advance_payment(self.heavy_order)
        self.assertEqual(again.status, HeavyOrder.STATUS_ADVANCE_PAID)

    def test_payload_is_cod_for_the_remainder(self):
        payload = heavy_order_service.build_heavy_order_payload(self.heavy_order)

        detail = payload["order_detail"]
        self.assertEqual(payload["shipment_category"], "b2b")
        self.assertEqual(detail["payment_type"], "COD")
        self.assertEqual(detail["total_collectable_amount"], 5000.5)
        self.assertEqual(detail["box_details"][0]["box_count"], 2)
        self.assertEqual(payload["warehouse_detail"]["pickup_location_id"], 9)

    def test_full_flow(self):
        heavy_order = heavy_order_service.record_advance_payment(self.heavy_order)

        with mock.patch.object(
            bigship, "add_heavy_order", return_value="Order Created Successfully, Order ID: 777"
        ):
            heavy_order = heavy_order_service.create_at_aggregator(heavy_order)
        self.assertEqual(heavy_order.system_order_id, 777)

        with mock.patch.object(bigship, "manifest_heavy_order") as man:
            heavy_order = heavy_order_service.manifest(heavy_order, 5)
        man.assert_called_once_with(777, 5, "OwnerRisk")
        self.assertEqual(heavy_order.status, HeavyOrder.STATUS_MANIFESTED)

        with mock.patch.object(bigship, "get_shipment_data", return_value={"master_awb": "AWB9"}):
            heavy_order_service.fetch_document(heavy_order, bigship.SHIPMENT_DATA_AWB)
        heavy_order.refresh_from_db()
        self.assertEqual(heavy_order.awb, "AWB9")

        with mock.patch.object(bigship, "cancel_awbs") as cancel:
            heavy_order = heavy_order_service.cancel(heavy_order)
        cancel.assert_called_once_with(["AWB9"])
        self.assertEqual(heavy_order.status, HeavyOrder.STATUS_CANCELLED)

    def test_second_submit_of_same_order_is_rejected(self):
        heavy_order_service.record_advance_payment(self.heavy_order)
        first = HeavyOrder.objects.get(id=self.heavy_order.id)
        stale = HeavyOrder.objects.get(id=self.heavy_order.id)

        with mock.patch.object(
            bigship, "add_heavy_order", return_value="Order Created Successfully, Order ID: 111"
        ) as add:
            heavy_order_service.create_at_aggregator(first)
            with self.assertRaises(InvalidHeavyOrderTransition):
                heavy_order_service.create_at_aggregator(stale)

        add.assert_called_once()
        self.heavy_order.refresh_from_db()
        self.assertEqual(self.heavy_order.system_order_id, 111)

    def test_cancel_twice_only_cancels_awb_once(self):
        HeavyOrder.objects.filter(id=self.heavy_order.id).update(
            status=HeavyOrder.STATUS_MANIFESTED, system_order_id=5, awb="AWB5"
        )
        stale = HeavyOrder.objects.get(id=self.heavy_order.id)

        with mock.patch.object(bigship, "cancel_awbs") as cancel_awbs:
            heavy_order_service.cancel(self.heavy_order)
            with self.assertRaises(InvalidHeavyOrderTransition):
                heavy_order_service.cancel(stale)

        cancel_awbs.assert_called_once_with(["AWB5"])

    def test_unparseable_order_id(self):
        heavy_order = heavy_order_service.record_advance_payment(self.heavy_order)

        with mock.patch.object(bigship, "add_heavy_order", return_value="Created"):
            with self.assertRaises(HeavyOrderError):
                heavy_order_service.create_at_aggregator(heavy_order)

    def test_track_requires_awb(self):
        with self.assertRaises(HeavyOrderError):
            heavy_order_service.track(self.heavy_order)
