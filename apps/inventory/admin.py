"""
Django admin configuration for inventory models.
"""

from django import forms
from django.contrib import admin

from apps.core.exceptions import PointOfSaleError
from apps.pricing.services import PricingEngine

from .models import Product
from .services import CatalogService


class ProductAdminForm(forms.ModelForm):
    """Product form that rejects items the pricing engine cannot price."""

    class Meta:
        model = Product
        fields = "__all__"

    def clean(self):
        """Validate metal, purity and rate availability."""
        cleaned_data = super().clean()
        if self.errors:
            return cleaned_data

        try:
            PricingEngine().compute_price(
                cleaned_data.get("metal"),
                cleaned_data.get("weight_grams") or 0,
                wastage_percent=cleaned_data.get("wastage_percent") or 0,
                making_charge=cleaned_data.get("making_charge") or 0,
                stone_price=cleaned_data.get("stone_price") or 0,
                purity=cleaned_data.get("purity"),
            )
        except PointOfSaleError as e:
            raise forms.ValidationError(e.message)

        return cleaned_data


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    form = ProductAdminForm

    list_display = [
        "sku",
        "name",
        "category",
        "metal",
        "purity",
        "weight_grams",
        "price",
        "stock",
        "is_available",
    ]

    list_filter = [
        "metal",
        "purity",
        "is_available",
        "category",
    ]

    search_fields = [
        "sku",
        "name",
        "description",
    ]

    ordering = ["-created_at"]

    # Price is derived and stock belongs to the order engine.
    readonly_fields = [
        "sku",
        "qr_code",
        "price",
        "stock",
        "created_at",
        "updated_at",
    ]

    def save_model(self, request, obj, form, change):
        """Reprice on every save; new products also get a SKU."""
        CatalogService().save_product(obj)
