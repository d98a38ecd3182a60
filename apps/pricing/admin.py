"""
Django admin configuration for pricing models.
"""

from django import forms
from django.contrib import admin

from apps.core.exceptions import PointOfSaleError

from .models import MetalRate
from .services import update_rate, validate_metal_purity


class MetalRateAdminForm(forms.ModelForm):
    class Meta:
        model = MetalRate
        fields = "__all__"

    def clean(self):
        """Apply the rate store's metal and purity rules."""
        cleaned_data = super().clean()
        metal = cleaned_data.get("metal", self.instance.metal)
        purity = cleaned_data.get("purity", self.instance.purity)
        if metal:
            try:
                cleaned_data["metal"], cleaned_data["purity"] = validate_metal_purity(
                    metal, purity
                )
            except PointOfSaleError as e:
                raise forms.ValidationError(e.message)
        return cleaned_data


@admin.register(MetalRate)
class MetalRateAdmin(admin.ModelAdmin):
    """Admin interface for MetalRate model."""

    form = MetalRateAdminForm

    list_display = [
        "metal",
        "purity",
        "price_per_gram",
        "updated_at",
    ]

    list_filter = [
        "metal",
        "purity",
    ]

    ordering = ["metal", "purity"]

    readonly_fields = [
        "updated_at",
    ]

    def get_readonly_fields(self, request, obj=None):
        """The (metal, purity) key is fixed once a rate exists."""
        if obj is not None:
            return ["metal", "purity", "updated_at"]
        return self.readonly_fields

    def save_model(self, request, obj, form, change):
        """Save through the rate store and reprice affected products."""
        rate, updated = update_rate(obj.metal, obj.price_per_gram, purity=obj.purity or None)
        obj.pk = rate.pk
        obj.updated_at = rate.updated_at
        if updated is not None:
            self.message_user(request, f"Repriced {updated} products")
