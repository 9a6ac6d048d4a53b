# payments/urls.py

"""
Mounted under /api/payments/:
    orders/<id>/advance/init/ | confirm/
    orders/<id>/remaining/init/ | confirm/
    orders/<id>/failed/
    heavy-orders/<id>/advance/init/ | confirm/
    mine/
    webhook/razorpay/
"""

from django.urls import path

from payments import views

app_name = "payments"

urlpatterns = [
    path("orders/<uuid:order_id>/advance/init/", views.AdvancePaymentInitView.as_view(), name="advance-init"),
    path("orders/<uuid:order_id>/advance/confirm/", views.AdvancePaymentConfirmView.as_view(), name="advance-confirm"),
    path("orders/<uuid:order_id>/remaining/init/", views.RemainingPaymentInitView.as_view(), name="remaining-init"),
    path(
        "orders/<uuid:order_id>/remaining/confirm/",
        views.RemainingPaymentConfirmView.as_view(),
        name="remaining-confirm",
    ),
    path("orders/<uuid:order_id>/failed/", views.PaymentFailedView.as_view(), name="payment-failed"),
    path(
        "heavy-orders/<uuid:heavy_order_id>/advance/init/",
        views.HeavyOrderAdvanceInitView.as_view(),
        name="heavy-advance-init",
    ),
    path(
        "heavy-orders/<uuid:heavy_order_id>/advance/confirm/",
        views.HeavyOrderAdvanceConfirmView.as_view(),
        name="heavy-advance-confirm",
    ),
    path("mine/", views.MyPaymentsView.as_view(), name="my-payments"),
    path("webhook/razorpay/", views.RazorpayWebhookView.as_view(), name="razorpay-webhook"),
]
