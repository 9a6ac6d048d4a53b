# bidding/urls.py

"""
Mounted under /api/bidding/:
    bids/                      list / create
    bids/popular/
    bids/<id>/                 retrieve / update / delete
    bids/<id>/offers/          seller: list, buyer: submit
    offers/mine/
    offers/<id>/status/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from bidding.views import BidViewSet, MyOffersView, OfferStatusView

app_name = "bidding"

router = DefaultRouter()
router.register(r"bids", BidViewSet, basename="bids")

urlpatterns = [
    path("offers/mine/", MyOffersView.as_view(), name="my-offers"),
    path("offers/<uuid:offer_id>/status/", OfferStatusView.as_view(), name="offer-status"),
    path("", include(router.urls)),
]
