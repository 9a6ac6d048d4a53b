# shipping/apps.py

from django.apps import AppConfig


class ShippingConfig(AppConfig):
    """
    Shipping: parcel estimation, aggregator (BigShip) client,
    cart rate quotes and heavy (B2B) orders.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "shipping"
