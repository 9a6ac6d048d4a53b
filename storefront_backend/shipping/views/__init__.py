# shipping/views/__init__.py

from .aggregator import (
    CourierListView,
    PaymentCategoryListView,
    WalletBalanceView,
    WarehouseView,
)
from .heavy_orders import (
    HeavyOrderCancelView,
    HeavyOrderDetailView,
    HeavyOrderDocumentView,
    HeavyOrderListCreateView,
    HeavyOrderManifestView,
    HeavyOrderRatesView,
    HeavyOrderSubmitView,
    HeavyOrderTrackView,
)
from .rates import CartQuoteView, CartSelectRateView, ProductRateView, TrackingView

__all__ = [
    "CartQuoteView",
    "CartSelectRateView",
    "ProductRateView",
    "TrackingView",
    "HeavyOrderListCreateView",
    "HeavyOrderDetailView",
    "HeavyOrderSubmitView",
    "HeavyOrderRatesView",
    "HeavyOrderManifestView",
    "HeavyOrderDocumentView",
    "HeavyOrderTrackView",
    "HeavyOrderCancelView",
    "CourierListView",
    "PaymentCategoryListView",
    "WalletBalanceView",
    "WarehouseView",
]
