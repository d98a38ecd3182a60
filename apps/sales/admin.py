"""
Django admin configuration for sales models.

Orders are immutable and returns change status only through their
transitions, so both are read-only here.
"""

from django.contrib import admin

from .models import Order, OrderItem, Return


class OrderItemInline(admin.TabularInline):
    """Inline admin for OrderItem model."""

    model = OrderItem
    extra = 0
    can_delete = False
    fields = ["position", "sku", "name", "unit_price", "qty", "line_total"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin interface for Order model."""

    list_display = [
        "order_id",
        "invoice_number",
        "payment_mode",
        "subtotal",
        "discount",
        "tax",
        "grand_total",
        "created_at",
    ]
    list_filter = ["payment_mode", "created_at"]
    search_fields = ["order_id", "invoice_number", "customer__name", "customer__phone"]
    date_hierarchy = "created_at"
    inlines = [OrderItemInline]
    fieldsets = [
        (
            "Identifiers",
            {
                "fields": ["order_id", "invoice_number", "created_at"],
            },
        ),
        (
            "Customer",
            {
                "fields": ["customer"],
            },
        ),
        (
            "Totals",
            {
                "fields": ["subtotal", "discount", "tax", "grand_total"],
            },
        ),
        (
            "Payment",
            {
                "fields": ["payment_mode", "payment_methods"],
            },
        ),
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Return)
class ReturnAdmin(admin.ModelAdmin):
    """Admin interface for Return model."""

    list_display = [
        "order_id",
        "invoice_number",
        "grand_total",
        "return_reason",
        "return_type",
        "status",
        "return_date",
    ]
    list_filter = ["status", "return_reason", "return_type", "return_date"]
    search_fields = ["order_id", "invoice_number"]
    readonly_fields = [
        "order_id",
        "invoice_number",
        "customer",
        "items",
        "grand_total",
        "return_reason",
        "return_type",
        "return_date",
        "return_time",
        "status",
        "created_at",
        "updated_at",
    ]

    def has_add_permission(self, request):
        return False
