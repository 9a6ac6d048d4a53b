# wishlist/urls.py

from django.urls import path

from wishlist.views import WishlistItemView, WishlistView

app_name = "wishlist"

urlpatterns = [
    path("", WishlistView.as_view(), name="list"),
    path("<uuid:product_id>/", WishlistItemView.as_view(), name="item"),
]
