# bidding/admin.py

from django.contrib import admin

from bidding.models import Bid, BidOffer


@admin.register(Bid)
class BidAdmin(admin.ModelAdmin):
    list_display = ("product", "seller", "base_price", "moq", "status", "bid_count", "end_time")
    list_filter = ("status",)
    search_fields = ("product__name", "seller__email")


@admin.register(BidOffer)
class BidOfferAdmin(admin.ModelAdmin):
    list_display = ("bid", "buyer", "bid_amount", "quantity", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("buyer__email", "buyer_name")
