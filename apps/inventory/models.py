"""
Inventory models for jewellery shop billing.

Each product is a catalog entry keyed by SKU with physical attributes
(metal, purity, weight, wastage, making and stone charges) that drive its
derived price, plus the on-hand stock count decremented by sales.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.pricing.models import MetalRate


class Product(models.Model):
    """
    Catalog product with metal-based dynamic pricing.

    The SKU is generated once on creation and never changes. ``price`` is
    derived from the current metal rate and recomputed when the product is
    saved through the catalog service or when its rate changes. ``stock``
    is only mutated by the order engine.
    """

    sku = models.CharField(
        max_length=50,
        unique=True,
        help_text="Stock keeping unit (e.g., RIN-202410-0001)",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name",
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Category name, used as SKU prefix",
    )

    # Pricing attributes
    metal = models.CharField(
        max_length=10,
        choices=MetalRate.METAL_CHOICES,
        default=MetalRate.GOLD,
        help_text="Metal the item is made of",
    )

    purity = models.CharField(
        max_length=5,
        choices=MetalRate.PURITY_CHOICES,
        blank=True,
        default="",
        help_text="Karat grade, required for gold",
    )

    weight_grams = models.DecimalField(
        max_digits=10,
        decimal_places=3,
        default=Decimal("0.000"),
        validators=[MinValueValidator(Decimal("0.000"))],
        help_text="Metal weight in grams",
    )

    wastage_percent = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Wastage surcharge as a percentage of metal value",
    )

    making_charge = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Flat making charge",
    )

    stone_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Value of stones set in the item",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Derived sale price in whole rupees",
    )

    # Stock
    stock = models.IntegerField(
        default=0,
        help_text="Quantity on hand",
    )

    description = models.TextField(
        blank=True,
        help_text="Product description",
    )

    qr_code = models.CharField(
        max_length=80,
        blank=True,
        help_text="QR label payload (QR-<sku>)",
    )

    is_available = models.BooleanField(
        default=True,
        help_text="Whether the product is offered for sale",
    )

    # Timestamps
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the product was created",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the product was last updated",
    )

    class Meta:
        db_table = "inventory_products"
        ordering = ["-created_at"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["metal", "purity"], name="product_rate_key_idx"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"
