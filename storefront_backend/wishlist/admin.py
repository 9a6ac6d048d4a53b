# wishlist/admin.py

from django.contrib import admin

from wishlist.models import WishlistItem


@admin.register(WishlistItem)
class WishlistItemAdmin(admin.ModelAdmin):
    list_display = ("user", "name", "base_price", "discount_price", "added_at")
    search_fields = ("user__email", "name")
