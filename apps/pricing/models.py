"""
Pricing models for metal rate management.

Stores the current price per gram for each (metal, purity) pair. Gold is
priced per karat grade; silver has a single implicit purity stored as an
empty string. Product prices are derived from these rows.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class MetalRate(models.Model):
    """
    Current rate per gram for a (metal, purity) pair.

    At most one row exists per key; updates overwrite the row in place
    (last write wins) and stamp ``updated_at``.
    """

    # Metal choices
    GOLD = "gold"
    SILVER = "silver"

    METAL_CHOICES = [
        (GOLD, "Gold"),
        (SILVER, "Silver"),
    ]

    # Gold purity choices
    PURITY_24K = "24K"
    PURITY_22K = "22K"
    PURITY_18K = "18K"

    PURITY_CHOICES = [
        (PURITY_24K, "24 Karat"),
        (PURITY_22K, "22 Karat"),
        (PURITY_18K, "18 Karat"),
    ]

    GOLD_PURITIES = [PURITY_24K, PURITY_22K, PURITY_18K]

    metal = models.CharField(
        max_length=10,
        choices=METAL_CHOICES,
        help_text="Priceable metal",
    )

    purity = models.CharField(
        max_length=5,
        choices=PURITY_CHOICES,
        blank=True,
        default="",
        help_text="Karat grade for gold; empty for silver",
    )

    price_per_gram = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Rate per gram in rupees",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When this rate was last set",
    )

    class Meta:
        db_table = "pricing_metal_rates"
        ordering = ["metal", "purity"]
        verbose_name = "Metal Rate"
        verbose_name_plural = "Metal Rates"
        constraints = [
            models.UniqueConstraint(fields=["metal", "purity"], name="metal_rate_key_unique"),
            models.CheckConstraint(
                condition=models.Q(price_per_gram__gt=0), name="metal_rate_price_positive"
            ),
        ]

    def __str__(self):
        label = f"{self.metal} {self.purity}".strip()
        return f"{label} - {self.price_per_gram}/g"

    @classmethod
    def normalize_key(cls, metal, purity=None):
        """
        Return the storage key for a (metal, purity) pair.

        Silver ignores purity. Validation of the values happens in the
        rate store; this only canonicalizes spelling.
        """
        metal = (metal or "").strip().lower()
        if metal == cls.SILVER:
            return metal, ""
        return metal, (purity or "").strip().upper()
