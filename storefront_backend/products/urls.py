# products/urls.py

"""
PRODUCTS URLS

Mounted under /api/catalog/:
    products/                     list / create
    products/<id>/                retrieve / update / delete
    products/featured|popular/
    products/<id>/related|view|reviews/
    reviews/<id>/                 delete own review
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import ProductViewSet, ReviewDetailView

app_name = "products"

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("reviews/<uuid:review_id>/", ReviewDetailView.as_view(), name="review-detail"),
    path("", include(router.urls)),
]
