# shipping/tests/test_shipping_api.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from cart.services import cart_service
from products.models import Product
from shipping.models import HeavyOrder
from shipping.services import bigship
from shipping.services.exceptions import BigShipError, BigShipRateLimited
from shipping.tests.test_shipping_services import RATES
from users.models import User


class ShippingApiTests(TestCase):
    """
    GUARANTEES:
    - quote/select return the refreshed cart
    - aggregator failures surface as 502 SHIPPING_PROVIDER_ERROR
    - aggregator rate limiting surfaces as 503 SHIPPING_PROVIDER_BUSY
    - heavy orders are owner-scoped
    - aggregator account views are admin-only
    """

    def setUp(self):
        self.client = APIClient()
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass-1234", role=User.ROLE_ADMIN
        )
        self.product = Product.objects.create(owner=self.seller, name="Kettle", base_price=Decimal("500.00"))

        cart = cart_service.get_or_create_cart(self.buyer)
        cart_service.add_item(cart, self.product, 1)

        self.client.force_authenticate(self.buyer)

    def test_quote_and_select(self):
        with mock.patch.object(bigship, "calculate_rates", return_value=RATES):
            res = self.client.post(reverse("shipping:cart-quote"), {"pincode": "560001"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["selected"]["courier_id"], 7)
        self.assertEqual(res.data["cart"]["shipping_pincode"], "560001")

        res = self.client.post(reverse("shipping:cart-select"), {"courier_id": 11}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        res = self.client.post(reverse("shipping:cart-select"), {"courier_id": 404}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "COURIER_NOT_QUOTED")

    def test_invalid_pincode_is_400(self):
        res = self.client.post(reverse("shipping:cart-quote"), {"pincode": "12"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_provider_error_is_502(self):
        with mock.patch.object(bigship, "calculate_rates", side_effect=BigShipError("down")):
            res = self.client.post(reverse("shipping:cart-quote"), {"pincode": "560001"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(res.data["error"]["code"], "SHIPPING_PROVIDER_ERROR")

    def test_provider_rate_limit_is_503(self):
        limited = BigShipRateLimited("slow down", status_code=429)
        with mock.patch.object(bigship, "calculate_rates", side_effect=limited):
            res = self.client.post(reverse("shipping:cart-quote"), {"pincode": "560001"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(res.data["error"]["code"], "SHIPPING_PROVIDER_BUSY")

    def test_product_rates(self):
        with mock.patch.object(bigship, "calculate_rates", return_value=RATES):
            res = self.client.post(
                reverse("shipping:product-rates"),
                {"product_id": str(self.product.id), "quantity": 2, "pincode": "560001"},
                format="json",
            )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["cheapest"]["courier_id"], 7)

    def test_heavy_order_create_and_owner_scope(self):
        payload = {
            "invoice_id": "INV-2001",
            "warehouse_id": 3,
            "first_name": "Asha",
            "last_name": "Verma",
            "phone": "9876543210",
            "address_line1": "12 MG Road",
            "pincode": "560001",
            "products": [
                {"name": "Rack", "quantity": 1, "weight": 20, "length": 90, "width": 40, "height": 180}
            ],
            "total_amount": "8000.00",
            "invoice_document_file": "https://files.example.com/inv.pdf",
        }
        res = self.client.post(reverse("shipping:heavy-orders"), payload, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["advance_amount"], "4000.00")
        heavy_order_id = res.data["id"]

        res = self.client.post(reverse("shipping:heavy-orders"), payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.post(reverse("shipping:heavy-order-submit", args=[heavy_order_id]))
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

        self.client.force_authenticate(self.seller)
        res = self.client.get(reverse("shipping:heavy-order-detail", args=[heavy_order_id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(HeavyOrder.objects.filter(id=heavy_order_id).exists())

    def test_aggregator_views_admin_only(self):
        res = self.client.get(reverse("shipping:wallet"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        with mock.patch.object(bigship, "get_wallet_balance", return_value="1500.00"):
            res = self.client.get(reverse("shipping:wallet"))
        self.assertEqual(res.data, {"balance": "1500.00"})
