# orders/admin.py

from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "seller", "product_name", "quantity", "unit_price", "line_total")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_no",
        "user",
        "status",
        "payment_status",
        "total_amount",
        "paid_amount",
        "is_bid_order",
        "created_at",
    )
    list_filter = ("status", "payment_status", "is_bid_order")
    search_fields = ("order_no", "user__email", "tracking_id")
    readonly_fields = ("order_no", "total_amount", "paid_amount", "remaining_amount", "created_at", "updated_at")
    inlines = [OrderItemInline]
