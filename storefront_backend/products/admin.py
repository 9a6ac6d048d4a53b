# products/admin.py

from django.contrib import admin

from products.models import Product, Review


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    fields = ("user_name", "rating", "text", "created_at")
    readonly_fields = ("user_name", "rating", "text", "created_at")
    can_delete = False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "owner",
        "category",
        "base_price",
        "discount_price",
        "stock_quantity",
        "status",
        "view_count",
        "avg_rating",
    )
    list_filter = ("status", "category", "free_shipping")
    search_fields = ("name", "sku", "brand", "owner__email")
    readonly_fields = ("view_count", "avg_rating", "review_count", "created_at", "updated_at")
    inlines = [ReviewInline]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("product", "user_name", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("product__name", "user__email", "user_name")
