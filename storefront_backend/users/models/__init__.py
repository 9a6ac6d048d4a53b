"""
PATH: users/models/__init__.py

Users models export surface.
"""

from .address import Address
from .user import User, UserManager

__all__ = [
    "User",
    "UserManager",
    "Address",
]
