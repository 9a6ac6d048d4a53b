# orders/tests/test_orders.py

"""
ORDER TESTS

Run with:
    python manage.py test orders -v 2
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

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
from orders.services.exceptions import (
    CheckoutError,
    EmptyCartError,
    InvalidOrderTransitionError,
    OrderNotPaidError,
    OrderPermissionError,
)
from orders.services.order_lifecycle import can_transition
from products.models import Product
from users.models import Address, User


class OrderBase(TestCase):
    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")
        self.stranger = User.objects.create_user(email="stranger@example.com", password="pass-1234")

        self.tea = Product.objects.create(
            owner=self.seller,
            name="Assam Tea",
            base_price=Decimal("300.00"),
            discount_price=Decimal("250.00"),
            stock_quantity=100,
        )
        self.cart = cart_service.get_or_create_cart(self.buyer)

    def _bid_offer(self, quantity=10, amount="95.00"):
        bid = bid_service.create_bid(
            seller=self.seller,
            product=self.tea,
            data={"base_price": Decimal("280.00"), "end_time": timezone.now() + timedelta(days=1)},
        )
        return bid_service.submit_offer(buyer=self.buyer, bid=bid, bid_amount=Decimal(amount), quantity=quantity)


class OrderLifecycleTests(TestCase):
    def test_transitions(self):
        self.assertTrue(can_transition(from_status="pending", to_status="processing"))
        self.assertTrue(can_transition(from_status="processing", to_status="in_transit"))
        self.assertTrue(can_transition(from_status="in_transit", to_status="delivered"))
        self.assertFalse(can_transition(from_status="in_transit", to_status="cancelled"))
        self.assertFalse(can_transition(from_status="delivered", to_status="cancelled"))
        self.assertFalse(can_transition(from_status="cancelled", to_status="pending"))


class CheckoutTests(OrderBase):
    """
    GUARANTEES:
    - empty carts are rejected
    - total = items at live price + selected shipping
    - lines are snapshotted; nulls are dropped from the address
    - bid orders price at the offer amount and belong to the offer's buyer
    """

    def test_empty_cart_rejected(self):
        with self.assertRaises(EmptyCartError):
            checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)

    def test_cart_order_totals_and_snapshot(self):
        cart_service.add_item(self.cart, self.tea, 2)
        cart_service.apply_shipping_selection(
            self.cart, courier_id=7, courier_name="Delhivery", shipping_cost="80.00", tat_days=3
        )

        order = checkout_orchestrator.create_order_from_cart(
            user=self.buyer,
            cart=self.cart,
            shipping_address={"name": "Asha", "city": "Pune", "landmark": None},
        )

        self.assertEqual(order.items_total, Decimal("500.00"))
        self.assertEqual(order.total_amount, Decimal("580.00"))
        self.assertEqual(order.remaining_amount, Decimal("580.00"))
        self.assertEqual(order.status, Order.STATUS_PENDING)
        self.assertEqual(order.payment_status, Order.PAYMENT_PENDING)
        self.assertEqual(order.courier_name, "Delhivery")
        self.assertEqual(order.shipping_address, {"name": "Asha", "city": "Pune"})
        self.assertTrue(order.order_no.startswith("ORD"))

        line = order.items.get()
        self.tea.name = "Renamed"
        self.tea.save()
        line.refresh_from_db()
        self.assertEqual(line.product_name, "Assam Tea")
        self.assertEqual(line.line_total, Decimal("500.00"))

        # cart survives until the advance is paid
        self.assertEqual(cart_service.item_count(self.cart), 2)

    def test_bid_order(self):
        offer = self._bid_offer(quantity=10, amount="95.00")

        with self.assertRaises(OrderPermissionError):
            checkout_orchestrator.create_bid_order(user=self.stranger, offer=offer)

        order = checkout_orchestrator.create_bid_order(user=self.buyer, offer=offer)
        self.assertTrue(order.is_bid_order)
        self.assertEqual(order.total_amount, Decimal("950.00"))
        self.assertEqual(order.items.get().unit_price, Decimal("95.00"))

        with self.assertRaises(CheckoutError):
            checkout_orchestrator.create_bid_order(user=self.buyer, offer=offer)

    def test_cancel_bid_order_rejects_offer(self):
        offer = self._bid_offer()
        order = checkout_orchestrator.create_bid_order(user=self.buyer, offer=offer)

        order = checkout_orchestrator.cancel_order(user=self.buyer, order=order)

        offer.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(offer.status, BidOffer.STATUS_REJECTED)

    def test_cancel_owner_only_and_not_after_shipping(self):
        cart_service.add_item(self.cart, self.tea, 1)
        order = checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)

        with self.assertRaises(OrderPermissionError):
            checkout_orchestrator.cancel_order(user=self.stranger, order=order)

        Order.objects.filter(id=order.id).update(status=Order.STATUS_IN_TRANSIT)
        with self.assertRaises(CheckoutError):
            checkout_orchestrator.cancel_order(user=self.buyer, order=order)


class FulfilmentTests(OrderBase):
    def setUp(self):
        super().setUp()
        cart_service.add_item(self.cart, self.tea, 1)
        self.order = checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)
        Order.objects.filter(id=self.order.id).update(
            status=Order.STATUS_PROCESSING, payment_status=Order.PAYMENT_PARTIAL
        )

    def test_in_transit_requires_tracking(self):
        with self.assertRaises(CheckoutError):
            checkout_orchestrator.advance_order_status(
                user=self.seller, order=self.order, target_status=Order.STATUS_IN_TRANSIT
            )

        order = checkout_orchestrator.advance_order_status(
            user=self.seller, order=self.order, target_status=Order.STATUS_IN_TRANSIT, tracking_id="AWB123"
        )
        self.assertEqual(order.tracking_id, "AWB123")

        order = checkout_orchestrator.advance_order_status(
            user=self.seller, order=order, target_status=Order.STATUS_DELIVERED
        )
        self.assertIsNotNone(order.delivered_at)

    def test_only_line_seller_fulfils(self):
        with self.assertRaises(OrderPermissionError):
            checkout_orchestrator.advance_order_status(
                user=self.buyer, order=self.order, target_status=Order.STATUS_IN_TRANSIT, tracking_id="X"
            )

    def test_unpaid_order_cannot_be_fulfilled(self):
        Order.objects.filter(id=self.order.id).update(
            status=Order.STATUS_PENDING, payment_status=Order.PAYMENT_PENDING
        )
        with self.assertRaises(OrderNotPaidError):
            checkout_orchestrator.advance_order_status(
                user=self.seller, order=self.order, target_status=Order.STATUS_PROCESSING
            )

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING)

        order = checkout_orchestrator.advance_order_status(
            user=self.seller, order=self.order, target_status=Order.STATUS_CANCELLED
        )
        self.assertEqual(order.status, Order.STATUS_CANCELLED)

    def test_skipping_states_rejected(self):
        Order.objects.filter(id=self.order.id).update(status=Order.STATUS_PENDING)
        with self.assertRaises(InvalidOrderTransitionError):
            checkout_orchestrator.advance_order_status(
                user=self.seller, order=self.order, target_status=Order.STATUS_DELIVERED
            )


class OrderApiTests(OrderBase):
    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.client.force_authenticate(self.buyer)

    def test_checkout_with_saved_address(self):
        address = Address.objects.create(
            user=self.buyer,
            contact_name="Asha",
            phone="9876543210",
            address_line1="12 MG Road",
            city="Pune",
            state="MH",
            pincode="411001",
        )
        cart_service.add_item(self.cart, self.tea, 1)

        res = self.client.post(reverse("orders:orders-checkout"), {"address_id": str(address.id)}, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["shipping_address"]["pincode"], "411001")

        res = self.client.get(reverse("orders:orders-list"))
        self.assertEqual(res.data["count"], 1)

    def test_checkout_empty_cart(self):
        res = self.client.post(
            reverse("orders:orders-checkout"),
            {"shipping_address": {"city": "Pune"}},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "EMPTY_CART")

    def test_other_users_order_is_404(self):
        cart_service.add_item(self.cart, self.tea, 1)
        order = checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)

        self.client.force_authenticate(self.stranger)
        res = self.client.get(reverse("orders:orders-detail", args=[order.id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_seller_moves_order_to_transit(self):
        cart_service.add_item(self.cart, self.tea, 1)
        order = checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)
        Order.objects.filter(id=order.id).update(
            status=Order.STATUS_PROCESSING, payment_status=Order.PAYMENT_PARTIAL
        )

        self.client.force_authenticate(self.seller)
        res = self.client.post(
            reverse("orders:orders-update-status", args=[order.id]),
            {"status": "in_transit", "tracking_id": "AWB1"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "in_transit")

    def test_seller_cannot_process_unpaid_order(self):
        cart_service.add_item(self.cart, self.tea, 1)
        order = checkout_orchestrator.create_order_from_cart(user=self.buyer, cart=self.cart)

        self.client.force_authenticate(self.seller)
        res = self.client.post(
            reverse("orders:orders-update-status", args=[order.id]),
            {"status": "processing"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "ORDER_NOT_PAID")
