"""
Serializers for inventory app.
"""

from rest_framework import serializers

from apps.pricing.models import MetalRate

from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Product in the shape the billing and catalog screens read."""

    weight = serializers.DecimalField(
        source="weight_grams", max_digits=10, decimal_places=3, read_only=True
    )
    wastage = serializers.DecimalField(
        source="wastage_percent", max_digits=6, decimal_places=2, read_only=True
    )
    makingCharges = serializers.DecimalField(
        source="making_charge", max_digits=12, decimal_places=2, read_only=True
    )
    stonePrice = serializers.DecimalField(
        source="stone_price", max_digits=12, decimal_places=2, read_only=True
    )
    qrCode = serializers.CharField(source="qr_code", read_only=True)
    available = serializers.BooleanField(source="is_available", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "category",
            "metal",
            "purity",
            "weight",
            "wastage",
            "makingCharges",
            "stonePrice",
            "price",
            "stock",
            "description",
            "qrCode",
            "available",
            "createdAt",
        ]


class ProductCreateSerializer(serializers.Serializer):
    """Product attributes accepted on creation; SKU and price are derived."""

    name = serializers.CharField(max_length=255)
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    metal = serializers.ChoiceField(choices=MetalRate.METAL_CHOICES, default=MetalRate.GOLD)
    purity = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    weight = serializers.DecimalField(
        max_digits=10, decimal_places=3, min_value=0, required=False, default=0
    )
    wastage = serializers.DecimalField(
        max_digits=6, decimal_places=2, min_value=0, required=False, default=0
    )
    makingCharges = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    stonePrice = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    stock = serializers.IntegerField(min_value=0, required=False, default=0)
    description = serializers.CharField(required=False, allow_blank=True)

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            "name": data["name"],
            "category": data.get("category", ""),
            "metal": data["metal"],
            "purity": data.get("purity"),
            "weight_grams": data["weight"],
            "wastage_percent": data["wastage"],
            "making_charge": data["makingCharges"],
            "stone_price": data["stonePrice"],
            "stock": data["stock"],
            "description": data.get("description", ""),
        }
