# cart/tests/test_cart.py

"""
CART TESTS

Run with:
    python manage.py test cart -v 2
"""

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from cart.models import CartItem
from cart.services import cart_service
from cart.services.exceptions import InvalidPincodeError, ProductUnavailableError
from products.models import Product
from users.models import User


class CartServiceTests(TestCase):
    """
    GUARANTEES:
    - adding an existing product increments its quantity
    - quantity <= 0 removes the line
    - totals use the live effective price
    - clear and content changes reset the shipping state
    """

    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")

        self.tea = Product.objects.create(
            owner=self.seller,
            name="Assam Tea",
            base_price=Decimal("300.00"),
            discount_price=Decimal("250.00"),
        )
        self.mug = Product.objects.create(owner=self.seller, name="Mug", base_price=Decimal("120.00"))

        self.cart = cart_service.get_or_create_cart(self.buyer)

    def _select_courier(self):
        cart_service.apply_shipping_selection(
            self.cart, courier_id=7, courier_name="Delhivery", shipping_cost="80", tat_days=4
        )

    def test_one_cart_per_user(self):
        self.assertEqual(cart_service.get_or_create_cart(self.buyer).id, self.cart.id)

    def test_add_increments_existing_line(self):
        cart_service.add_item(self.cart, self.tea, 1)
        cart_service.add_item(self.cart, self.tea, 2)

        self.assertEqual(CartItem.objects.get(cart=self.cart, product=self.tea).quantity, 3)
        self.assertEqual(cart_service.item_count(self.cart), 3)

    def test_total_uses_discount_or_base_price(self):
        cart_service.add_item(self.cart, self.tea, 2)
        cart_service.add_item(self.cart, self.mug, 1)

        self.assertEqual(cart_service.cart_total(self.cart), Decimal("620.00"))

        self.tea.discount_price = None
        self.tea.save()
        self.assertEqual(cart_service.cart_total(self.cart), Decimal("720.00"))

    def test_update_quantity_to_zero_removes_item(self):
        cart_service.add_item(self.cart, self.tea, 2)

        self.assertIsNone(cart_service.update_quantity(self.cart, self.tea.id, 0))
        self.assertFalse(CartItem.objects.filter(cart=self.cart).exists())

    def test_update_quantity_sets_value(self):
        cart_service.add_item(self.cart, self.tea, 2)

        item = cart_service.update_quantity(self.cart, self.tea.id, 5)

        self.assertEqual(item.quantity, 5)

    def test_inactive_product_rejected(self):
        self.mug.status = Product.STATUS_DRAFT
        self.mug.save()

        with self.assertRaises(ProductUnavailableError):
            cart_service.add_item(self.cart, self.mug)

    def test_content_change_invalidates_shipping_selection(self):
        cart_service.add_item(self.cart, self.tea)
        self._select_courier()
        self.assertTrue(self.cart.has_shipping_selection)

        cart_service.add_item(self.cart, self.mug)
        self.cart.refresh_from_db()

        self.assertFalse(self.cart.has_shipping_selection)
        self.assertEqual(self.cart.shipping_cost, Decimal("0.00"))

    def test_clear_resets_items_and_shipping(self):
        cart_service.add_item(self.cart, self.tea)
        cart_service.set_shipping_pincode(self.cart, "560001")
        self._select_courier()

        cart_service.clear_cart(self.cart)
        self.cart.refresh_from_db()

        self.assertTrue(self.cart.is_empty)
        self.assertEqual(self.cart.shipping_pincode, "")
        self.assertIsNone(self.cart.courier_id)
        self.assertEqual(cart_service.cart_total(self.cart), Decimal("0.00"))

    def test_grand_total_includes_shipping(self):
        cart_service.add_item(self.cart, self.mug, 2)
        self._select_courier()

        self.assertEqual(cart_service.grand_total(self.cart), Decimal("320.00"))

    def test_pincode_validation(self):
        for bad in ["5600", "56000a", "5600011", ""]:
            with self.assertRaises(InvalidPincodeError):
                cart_service.set_shipping_pincode(self.cart, bad)

        cart_service.set_shipping_pincode(self.cart, " 560001 ")
        self.assertEqual(self.cart.shipping_pincode, "560001")


class CartApiTests(TestCase):
    def setUp(self):
        seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")
        self.product = Product.objects.create(owner=seller, name="Mug", base_price=Decimal("120.00"))

        self.client = APIClient()
        self.client.force_authenticate(self.buyer)

    def test_add_update_remove_flow(self):
        res = self.client.post(
            reverse("cart:items"),
            {"product_id": str(self.product.id), "quantity": 2},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["item_count"], 2)
        self.assertEqual(res.data["total_price"], "240.00")

        res = self.client.patch(
            reverse("cart:item-detail", args=[self.product.id]),
            {"quantity": -1},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["items"], [])

    def test_shipping_address_rejects_bad_pincode(self):
        res = self.client.put(reverse("cart:shipping-address"), {"pincode": "12AB56"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVALID_PINCODE")

    def test_cart_requires_auth(self):
        res = APIClient().get(reverse("cart:cart"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
