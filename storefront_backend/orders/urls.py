# orders/urls.py

"""
Mounted under /api/orders/:
    orders/                      list (?role=seller)
    orders/checkout/             cart -> order
    orders/from-bid/             bid offer -> order
    orders/<id>/                 retrieve
    orders/<id>/cancel/
    orders/<id>/status/          seller / admin fulfilment
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from orders.views import OrderViewSet

app_name = "orders"

router = DefaultRouter()
router.register(r"orders", OrderViewSet, basename="orders")

urlpatterns = [
    path("", include(router.urls)),
]
