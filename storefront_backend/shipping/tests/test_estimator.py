# shipping/tests/test_estimator.py

"""
PARCEL ESTIMATOR TESTS

Pure functions only; no database.
"""

from decimal import Decimal

from django.test import SimpleTestCase

from shipping.services.estimator import (
    DEFAULT_BOX,
    Dimensions,
    ParcelItem,
    aggregate_dimensions,
    build_rate_request,
    delivery_window,
    ensure_product_details,
    estimate_box,
    normalize_category,
    select_cheapest,
    sort_rates,
    validate_pincode,
)
from shipping.services.exceptions import InvalidPincodeError


def _item(**overrides):
    data = {"name": "Kettle", "quantity": 1, "unit_price": Decimal("100.00")}
    data.update(overrides)
    return ParcelItem(**data)


class BoxEstimateTests(SimpleTestCase):
    """
    GUARANTEES:
    - the box starts at the largest item and grows by cbrt(volume ratio)
    - weight and sides never drop below the floors
    """

    def test_single_item_keeps_its_dimensions(self):
        box = estimate_box(
            aggregate_dimensions([_item(weight_kg=2.0, length_cm=30, width_cm=20, height_cm=15)])
        )

        self.assertEqual((box.length_cm, box.width_cm, box.height_cm), (30, 20, 15))
        self.assertEqual(box.weight_kg, 2.0)

    def test_volume_overflow_scales_every_side(self):
        box = estimate_box(aggregate_dimensions([_item(quantity=2)]))

        # 2000 cm3 into a 10x10x10 start: factor cbrt(2) -> 12.6 -> 13
        self.assertEqual((box.length_cm, box.width_cm, box.height_cm), (13, 13, 13))
        self.assertEqual(box.weight_kg, 1.0)

    def test_exact_cube_does_not_round_up_on_float_noise(self):
        box = estimate_box(aggregate_dimensions([_item(quantity=27)]))

        self.assertEqual((box.length_cm, box.width_cm, box.height_cm), (30, 30, 30))

    def test_floors_apply_to_small_parcels(self):
        box = estimate_box(
            aggregate_dimensions([_item(weight_kg=0.1, length_cm=4, width_cm=5, height_cm=6)])
        )

        self.assertEqual(box.weight_kg, 0.5)
        self.assertEqual((box.length_cm, box.width_cm, box.height_cm), (10, 10, 10))

    def test_empty_dimensions_use_default_box(self):
        self.assertEqual(estimate_box(Dimensions(0, 0, 0, 0, 0)), DEFAULT_BOX)

    def test_weight_sums_quantity(self):
        dims = aggregate_dimensions([_item(weight_kg=1.5, quantity=2), _item(weight_kg=0.25)])
        self.assertAlmostEqual(dims.total_weight, 3.25)


class RateRequestTests(SimpleTestCase):
    def test_b2c_prepaid_request_shape(self):
        payload = build_rate_request(
            [_item(quantity=2, category="Electronics")],
            pickup_pincode="110001",
            destination_pincode="560001",
        )

        self.assertEqual(payload["shipment_category"], "b2c")
        self.assertEqual(payload["payment_type"], "Prepaid")
        self.assertEqual(payload["pickup_pincode"], 110001)
        self.assertEqual(payload["shipment_invoice_amount"], 200.0)
        self.assertNotIn("risk_type", payload)

        box = payload["box_details"][0]
        self.assertEqual(box["box_count"], 1)
        self.assertEqual(box["product_details"][0]["product_category"], "Electronics")

    def test_b2b_cod_adds_owner_risk(self):
        payload = build_rate_request(
            [_item()],
            pickup_pincode="110001",
            destination_pincode="560001",
            b2b=True,
            payment_method="cod",
        )

        self.assertEqual(payload["shipment_category"], "b2b")
        self.assertEqual(payload["payment_type"], "COD")
        self.assertEqual(payload["risk_type"], "OwnerRisk")

    def test_empty_product_details_get_placeholder(self):
        boxes = ensure_product_details([{"box_count": 1, "product_details": []}])

        self.assertEqual(boxes[0]["product_details"][0]["product_name"], "Sample Product")

    def test_invalid_pincode_rejected(self):
        for value in ("12345", "1234567", "abcdef", None):
            with self.assertRaises(InvalidPincodeError):
                validate_pincode(value)

    def test_unknown_category_ships_as_others(self):
        self.assertEqual(normalize_category("electronics"), "Electronics")
        self.assertEqual(normalize_category("Kitchen"), "Others")
        self.assertEqual(normalize_category(None), "Others")


class RateSelectionTests(SimpleTestCase):
    def test_cheapest_first_wins_ties(self):
        rates = [
            {"courier_id": 1, "total_shipping_charges": 90},
            {"courier_id": 2, "total_shipping_charges": 70},
            {"courier_id": 3, "total_shipping_charges": 70},
        ]

        self.assertEqual(select_cheapest(rates)["courier_id"], 2)
        self.assertEqual([r["courier_id"] for r in sort_rates(rates)], [2, 3, 1])

    def test_no_rates_selects_nothing(self):
        self.assertIsNone(select_cheapest([]))

    def test_delivery_window(self):
        self.assertEqual(delivery_window({"tat": 4}), (4, 6))
        self.assertEqual(delivery_window({}), (3, 5))
