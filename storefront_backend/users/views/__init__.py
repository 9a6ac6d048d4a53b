from .addresses import AddressViewSet
from .me import MeView
from .profile import UserProfileView

__all__ = [
    "MeView",
    "UserProfileView",
    "AddressViewSet",
]
