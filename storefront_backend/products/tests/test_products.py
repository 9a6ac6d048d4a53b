# products/tests/test_products.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import TestCase

from products.models import Product, Review
from products.services import catalog_service, review_service
from products.services.exceptions import (
    ProductPermissionError,
    ReviewError,
    ReviewPermissionError,
)
from users.models import User


def make_product(owner, **overrides):
    data = {
        "name": "Cotton Kurta",
        "base_price": Decimal("999.00"),
        "category": "apparel",
        "stock_quantity": 20,
    }
    data.update(overrides)
    return Product.objects.create(owner=owner, **data)


class ProductModelTests(TestCase):
    """
    GUARANTEES:
    - discount price wins only when set and positive
    - base price must be positive
    """

    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )

    def test_effective_price_prefers_discount(self):
        product = make_product(self.seller, discount_price=Decimal("799.00"))
        self.assertEqual(product.effective_price, Decimal("799.00"))

    def test_zero_discount_falls_back_to_base_price(self):
        product = make_product(self.seller, discount_price=Decimal("0.00"))
        self.assertEqual(product.effective_price, Decimal("999.00"))

    def test_base_price_must_be_positive(self):
        with self.assertRaises(ValidationError):
            catalog_service.add_product(
                owner=self.seller,
                data={"name": "Free thing", "base_price": Decimal("0.00")},
            )


class CatalogServiceTests(TestCase):
    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.other_seller = User.objects.create_user(
            email="other@example.com", password="pass-1234", role=User.ROLE_SELLER
        )

    def test_popular_orders_by_view_count(self):
        quiet = make_product(self.seller, name="Quiet")
        busy = make_product(self.seller, name="Busy")

        for _ in range(3):
            catalog_service.increment_view_count(busy.id)
        catalog_service.increment_view_count(quiet.id)

        popular = catalog_service.popular_products(limit=2)
        self.assertEqual([p.name for p in popular], ["Busy", "Quiet"])

    def test_increment_view_count_returns_new_value(self):
        product = make_product(self.seller)

        self.assertEqual(catalog_service.increment_view_count(product.id), 1)
        self.assertEqual(catalog_service.increment_view_count(product.id), 2)

    def test_related_excludes_self_and_matches_category_name(self):
        current = make_product(self.seller, name="Current", category="shoes")
        same = make_product(self.seller, name="Same", category="shoes")
        by_name = make_product(self.seller, name="ByName", category="", category_name="shoes")
        make_product(self.seller, name="Other", category="books")

        related = catalog_service.related_products(current, limit=5)

        self.assertEqual({p.id for p in related}, {same.id, by_name.id})

    def test_related_empty_without_category(self):
        product = make_product(self.seller, category="", category_name="")
        make_product(self.seller, category="")

        self.assertEqual(catalog_service.related_products(product), [])

    def test_related_respects_limit(self):
        current = make_product(self.seller, category="toys")
        for i in range(6):
            make_product(self.seller, name=f"Toy {i}", category="toys")

        self.assertEqual(len(catalog_service.related_products(current, limit=3)), 3)

    def test_only_owner_can_update(self):
        product = make_product(self.seller)

        with self.assertRaises(ProductPermissionError):
            catalog_service.update_product(
                user=self.other_seller, product=product, data={"name": "Hijacked"}
            )

        catalog_service.update_product(user=self.seller, product=product, data={"name": "Renamed"})
        product.refresh_from_db()
        self.assertEqual(product.name, "Renamed")

    def test_counters_are_not_editable(self):
        product = make_product(self.seller)

        catalog_service.update_product(
            user=self.seller, product=product, data={"view_count": 500}
        )
        product.refresh_from_db()
        self.assertEqual(product.view_count, 0)


class ReviewServiceTests(TestCase):
    """
    GUARANTEES:
    - one review per (product, user); resubmission edits
    - avg_rating / review_count follow every change
    """

    def setUp(self):
        self.seller = User.objects.create_user(
            email="seller@example.com", password="pass-1234", role=User.ROLE_SELLER
        )
        self.buyer = User.objects.create_user(
            email="buyer@example.com", password="pass-1234", display_name="Asha"
        )
        self.buyer2 = User.objects.create_user(email="buyer2@example.com", password="pass-1234")
        self.product = make_product(self.seller)

    def test_submit_creates_then_updates(self):
        first = review_service.submit_review(user=self.buyer, product=self.product, rating=4, text="Good")
        second = review_service.submit_review(user=self.buyer, product=self.product, rating=2, text="Meh")

        self.assertEqual(first.id, second.id)
        self.assertEqual(Review.objects.count(), 1)

        self.product.refresh_from_db()
        self.assertEqual(self.product.review_count, 1)
        self.assertEqual(self.product.avg_rating, Decimal("2.00"))
        self.assertEqual(second.user_name, "Asha")

    def test_average_over_multiple_reviews(self):
        review_service.submit_review(user=self.buyer, product=self.product, rating=5)
        review_service.submit_review(user=self.buyer2, product=self.product, rating=4)

        self.product.refresh_from_db()
        self.assertEqual(self.product.review_count, 2)
        self.assertEqual(self.product.avg_rating, Decimal("4.50"))

    def test_delete_resets_counters_when_last_review_removed(self):
        review = review_service.submit_review(user=self.buyer, product=self.product, rating=3)

        review_service.delete_review(user=self.buyer, review=review)

        self.product.refresh_from_db()
        self.assertEqual(self.product.review_count, 0)
        self.assertEqual(self.product.avg_rating, Decimal("0.00"))

    def test_only_author_can_delete(self):
        review = review_service.submit_review(user=self.buyer, product=self.product, rating=3)

        with self.assertRaises(ReviewPermissionError):
            review_service.delete_review(user=self.buyer2, review=review)

    def test_rating_out_of_range_rejected(self):
        with self.assertRaises(ReviewError):
            review_service.submit_review(user=self.buyer, product=self.product, rating=6)

    def test_duplicate_review_rows_blocked_by_db(self):
        Review.objects.create(product=self.product, user=self.buyer, rating=3)

        with self.assertRaises(IntegrityError):
            Review.objects.create(product=self.product, user=self.buyer, rating=4)
