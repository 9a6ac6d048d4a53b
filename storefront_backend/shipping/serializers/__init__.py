# shipping/serializers/__init__.py

from .heavy_order import (
    HeavyOrderCreateSerializer,
    HeavyOrderProductLineSerializer,
    HeavyOrderSerializer,
    ManifestInputSerializer,
)
from .rates import (
    CartQuoteInputSerializer,
    ProductRateInputSerializer,
    SelectRateInputSerializer,
    TrackingQuerySerializer,
    WarehouseInputSerializer,
)

__all__ = [
    "CartQuoteInputSerializer",
    "SelectRateInputSerializer",
    "ProductRateInputSerializer",
    "TrackingQuerySerializer",
    "WarehouseInputSerializer",
    "HeavyOrderSerializer",
    "HeavyOrderCreateSerializer",
    "HeavyOrderProductLineSerializer",
    "ManifestInputSerializer",
]
