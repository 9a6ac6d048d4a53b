# cart/admin.py

from django.contrib import admin

from cart.models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    fields = ("product", "quantity")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("user", "shipping_pincode", "courier_name", "shipping_cost", "updated_at")
    search_fields = ("user__email",)
    inlines = [CartItemInline]
