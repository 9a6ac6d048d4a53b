# products/tests/test_permissions.py

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product, Review
from users.models import User


class ProductApiPermissionTests(TestCase):
    """
    GUARANTEES:
    - anonymous users can browse but not write
    - buyers cannot list products
    - only the owner (or admin) edits or deletes a listing
    """

    def setUp(self):
        self.client = APIClient()
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.other_seller = User.objects.create_user(
            email="other@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(email="buyer@example.com", password="pass-1234")
        self.admin = User.objects.create_superuser(email="admin@example.com", password="pass-1234")

        self.product = Product.objects.create(
            owner=self.seller,
            name="Brass Lamp",
            base_price=Decimal("1500.00"),
            category="decor",
        )

    def _payload(self, **overrides):
        payload = {"name": "Clay Pot", "base_price": "250.00", "category": "decor"}
        payload.update(overrides)
        return payload

    def test_anonymous_can_list_and_filter(self):
        Product.objects.create(owner=self.seller, name="Book", base_price=Decimal("10.00"), category="books")

        res = self.client.get(reverse("products:products-list"), {"category": "decor"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["name"], "Brass Lamp")

    def test_filter_by_owner(self):
        Product.objects.create(owner=self.other_seller, name="Rug", base_price=Decimal("900.00"))

        res = self.client.get(reverse("products:products-list"), {"owner": str(self.other_seller.id)})
        self.assertEqual([p["name"] for p in res.data["results"]], ["Rug"])

        res = self.client.get(reverse("products:products-list"), {"owner": "not-a-uuid"})
        self.assertEqual(res.data["count"], 0)

    def test_mine_lists_own_products(self):
        self.assertEqual(
            self.client.get(reverse("products:products-mine")).status_code,
            status.HTTP_401_UNAUTHORIZED,
        )

        self.client.force_authenticate(self.seller)
        res = self.client.get(reverse("products:products-mine"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([p["name"] for p in res.data["results"]], ["Brass Lamp"])

    def test_anonymous_cannot_create(self):
        res = self.client.post(reverse("products:products-list"), self._payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_buyer_cannot_create(self):
        self.client.force_authenticate(self.buyer)
        res = self.client.post(reverse("products:products-list"), self._payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_seller_creates_owned_product(self):
        self.client.force_authenticate(self.seller)
        res = self.client.post(reverse("products:products-list"), self._payload(), format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(str(res.data["owner_id"]), str(self.seller.id))
        self.assertEqual(res.data["effective_price"], "250.00")

    def test_non_owner_cannot_update(self):
        self.client.force_authenticate(self.other_seller)
        res = self.client.patch(
            reverse("products:products-detail", args=[self.product.id]),
            {"name": "Mine now"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["error"]["code"], "NOT_PRODUCT_OWNER")

    def test_admin_can_delete_any_product(self):
        self.client.force_authenticate(self.admin)
        res = self.client.delete(reverse("products:products-detail", args=[self.product.id]))

        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(id=self.product.id).exists())

    def test_view_counter_endpoint(self):
        res = self.client.post(reverse("products:products-record-view", args=[self.product.id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["view_count"], 1)

    def test_review_submit_and_delete_flow(self):
        self.client.force_authenticate(self.buyer)

        res = self.client.post(
            reverse("products:products-reviews", args=[self.product.id]),
            {"rating": 5, "text": "Lovely"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        review_id = res.data["id"]

        self.client.force_authenticate(self.other_seller)
        res = self.client.delete(reverse("products:review-detail", args=[review_id]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.buyer)
        res = self.client.delete(reverse("products:review-detail", args=[review_id]))
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Review.objects.exists())

    def test_anonymous_cannot_review(self):
        res = self.client.post(
            reverse("products:products-reviews", args=[self.product.id]),
            {"rating": 5},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
