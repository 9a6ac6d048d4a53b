# users/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import AddressViewSet, MeView, UserProfileView

app_name = "users"

router = DefaultRouter()
router.register("addresses", AddressViewSet, basename="address")

urlpatterns = [
    path("me/", MeView.as_view(), name="me"),
    path("profiles/<uuid:user_id>/", UserProfileView.as_view(), name="profile"),
    path("", include(router.urls)),
]
