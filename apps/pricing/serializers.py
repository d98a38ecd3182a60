"""
Serializers for pricing app.
"""

from rest_framework import serializers

from .models import MetalRate


class MetalRateSerializer(serializers.ModelSerializer):
    """Rate row in the shape the billing UI reads."""

    price = serializers.DecimalField(
        source="price_per_gram", max_digits=12, decimal_places=2, coerce_to_string=False
    )
    purity = serializers.SerializerMethodField()
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = MetalRate
        fields = ["id", "metal", "purity", "price", "updatedAt"]

    def get_purity(self, obj):
        return obj.purity or None


class RateUpdateSerializer(serializers.Serializer):
    """Body of PUT rates/<metal>."""

    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    purity = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PriceQuoteSerializer(serializers.Serializer):
    """Inputs for an ad-hoc price calculation."""

    metal = serializers.ChoiceField(choices=MetalRate.METAL_CHOICES)
    purity = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    weight = serializers.DecimalField(max_digits=10, decimal_places=3, min_value=0)
    wastage = serializers.DecimalField(
        max_digits=6, decimal_places=2, min_value=0, required=False, default=0
    )
    makingCharges = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    stonePrice = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
