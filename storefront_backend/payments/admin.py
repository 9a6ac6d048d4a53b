# payments/admin.py

from django.contrib import admin

from payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("payment_id", "user", "order", "heavy_order", "kind", "amount", "status", "created_at")
    list_filter = ("status", "kind", "method")
    search_fields = ("payment_id", "gateway_order_id", "user__email", "order__order_no")
    readonly_fields = ("provider_payload", "created_at")
