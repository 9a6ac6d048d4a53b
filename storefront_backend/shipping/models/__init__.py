"""
PATH: shipping/models/__init__.py
"""

from .heavy_order import HeavyOrder

__all__ = ["HeavyOrder"]
