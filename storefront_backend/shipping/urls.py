# shipping/urls.py

from django.urls import path

from shipping.views import (
    CartQuoteView,
    CartSelectRateView,
    CourierListView,
    HeavyOrderCancelView,
    HeavyOrderDetailView,
    HeavyOrderDocumentView,
    HeavyOrderListCreateView,
    HeavyOrderManifestView,
    HeavyOrderRatesView,
    HeavyOrderSubmitView,
    HeavyOrderTrackView,
    PaymentCategoryListView,
    ProductRateView,
    TrackingView,
    WalletBalanceView,
    WarehouseView,
)

app_name = "shipping"

urlpatterns = [
    # ---------------- RATES ----------------
    path("cart/quote/", CartQuoteView.as_view(), name="cart-quote"),
    path("cart/select/", CartSelectRateView.as_view(), name="cart-select"),
    path("rates/product/", ProductRateView.as_view(), name="product-rates"),
    path("tracking/", TrackingView.as_view(), name="tracking"),
    # ---------------- HEAVY ORDERS ----------------
    path("heavy-orders/", HeavyOrderListCreateView.as_view(), name="heavy-orders"),
    path("heavy-orders/<uuid:heavy_order_id>/", HeavyOrderDetailView.as_view(), name="heavy-order-detail"),
    path("heavy-orders/<uuid:heavy_order_id>/submit/", HeavyOrderSubmitView.as_view(), name="heavy-order-submit"),
    path("heavy-orders/<uuid:heavy_order_id>/rates/", HeavyOrderRatesView.as_view(), name="heavy-order-rates"),
    path(
        "heavy-orders/<uuid:heavy_order_id>/manifest/",
        HeavyOrderManifestView.as_view(),
        name="heavy-order-manifest",
    ),
    path(
        "heavy-orders/<uuid:heavy_order_id>/documents/<int:document_type>/",
        HeavyOrderDocumentView.as_view(),
        name="heavy-order-document",
    ),
    path("heavy-orders/<uuid:heavy_order_id>/track/", HeavyOrderTrackView.as_view(), name="heavy-order-track"),
    path("heavy-orders/<uuid:heavy_order_id>/cancel/", HeavyOrderCancelView.as_view(), name="heavy-order-cancel"),
    # ---------------- AGGREGATOR ACCOUNT (admin) ----------------
    path("admin/couriers/", CourierListView.as_view(), name="couriers"),
    path("admin/payment-categories/", PaymentCategoryListView.as_view(), name="payment-categories"),
    path("admin/wallet/", WalletBalanceView.as_view(), name="wallet"),
    path("admin/warehouses/", WarehouseView.as_view(), name="warehouses"),
]
