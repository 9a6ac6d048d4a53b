# shipping/admin.py

from django.contrib import admin

from shipping.models import HeavyOrder


@admin.register(HeavyOrder)
class HeavyOrderAdmin(admin.ModelAdmin):
    list_display = ("invoice_id", "user", "status", "total_amount", "advance_amount", "awb", "created_at")
    list_filter = ("status",)
    search_fields = ("invoice_id", "awb", "user__email", "phone")
    readonly_fields = ("system_order_id", "courier_id", "awb", "created_at", "updated_at")
