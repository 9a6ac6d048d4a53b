# payments/views/__init__.py

from .payment import (
    AdvancePaymentConfirmView,
    AdvancePaymentInitView,
    HeavyOrderAdvanceConfirmView,
    HeavyOrderAdvanceInitView,
    MyPaymentsView,
    PaymentFailedView,
    RemainingPaymentConfirmView,
    RemainingPaymentInitView,
)
from .webhook import RazorpayWebhookView, WebhookThrottle

__all__ = [
    "AdvancePaymentConfirmView",
    "AdvancePaymentInitView",
    "HeavyOrderAdvanceConfirmView",
    "HeavyOrderAdvanceInitView",
    "MyPaymentsView",
    "PaymentFailedView",
    "RemainingPaymentConfirmView",
    "RemainingPaymentInitView",
    "RazorpayWebhookView",
    "WebhookThrottle",
]
