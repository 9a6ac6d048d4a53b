# products/services/catalog_service.py

"""
CATALOG SERVICE

Read models for the storefront home / shop / product screens and the
owner-checked write path used by sellers.

Rules:
- Only the owner (or an admin) can update or delete a listing.
- view_count increments are atomic (F-expression), never read-modify-write.
"""

from __future__ import annotations

import logging
import random

from django.db.models import F, Q

from products.models import Product
from products.services.exceptions import ProductNotFound, ProductPermissionError

logger = logging.getLogger(__name__)

DEFAULT_FEATURED_LIMIT = 10
DEFAULT_POPULAR_LIMIT = 10
DEFAULT_RELATED_LIMIT = 5

# Fields a seller may set through the API; counters are service-owned.
EDITABLE_FIELDS = {
    "name",
    "sku",
    "base_price",
    "discount_price",
    "description",
    "short_description",
    "category",
    "category_name",
    "brand",
    "color",
    "size",
    "weight_kg",
    "length_cm",
    "width_cm",
    "height_cm",
    "stock_quantity",
    "free_shipping",
    "status",
    "featured_image",
    "images",
    "videos",
}


# ============================================================
# READS
# ============================================================


def list_products():
    return Product.objects.select_related("owner").all()


def products_by_category(category: str):
    return list_products().filter(category=category)


def products_by_owner(owner_id):
    return list_products().filter(owner_id=owner_id)


def get_product(product_id) -> Product:
    product = Product.objects.select_related("owner").filter(id=product_id).first()
    if product is None:
        raise ProductNotFound(f"Product {product_id} not found")
    return product


def featured_products(limit: int = DEFAULT_FEATURED_LIMIT):
    """Most recently listed products."""
    return list(list_products().order_by("-created_at")[:limit])


def popular_products(limit: int = DEFAULT_POPULAR_LIMIT):
    return list(list_products().order_by("-view_count", "-created_at")[:limit])


def related_products(product: Product, limit: int = DEFAULT_RELATED_LIMIT):
    """
    Same category (matched against category or category_name), excluding
    the product itself, shuffled. Empty when the product has no category.
    """
    category = (product.category or product.category_name or "").strip()
    if not category:
        return []

    candidates = list(
        list_products()
        .filter(Q(category=category) | Q(category_name=category))
        .exclude(id=product.id)
    )
    random.shuffle(candidates)
    return candidates[:limit]


# ============================================================
# WRITES
# ============================================================


def _ensure_can_edit(*, user, product: Product) -> None:
    if getattr(user, "role", None) == "admin":
        return
    if product.owner_id != user.id:
        raise ProductPermissionError("Only the product owner can change this listing")


def add_product(*, owner, data: dict) -> Product:
    fields = {k: v for k, v in data.items() if k in EDITABLE_FIELDS}
    product = Product(owner=owner, **fields)
    product.full_clean()
    product.save()

    logger.info(
        "Product listed",
        extra={"product_id": str(product.id), "owner_id": str(owner.id)},
    )
    return product


def update_product(*, user, product: Product, data: dict) -> Product:
    _ensure_can_edit(user=user, product=product)

    changed = []
    for field, value in data.items():
        if field in EDITABLE_FIELDS:
            setattr(product, field, value)
            changed.append(field)

    if changed:
        product.full_clean()
        product.save(update_fields=changed + ["updated_at"])

    return product


def delete_product(*, user, product: Product) -> None:
    _ensure_can_edit(user=user, product=product)

    product_id = str(product.id)
    product.delete()

    logger.info("Product deleted", extra={"product_id": product_id, "user_id": str(user.id)})


def increment_view_count(product_id) -> int:
    updated = Product.objects.filter(id=product_id).update(view_count=F("view_count") + 1)
    if not updated:
        raise ProductNotFound(f"Product {product_id} not found")

    return Product.objects.values_list("view_count", flat=True).get(id=product_id)
