# payments/models/__init__.py

from .payment import Payment

__all__ = ["Payment"]
