"""
Pricing services: rate store, pricing engine and price recalculation.

- RateStore reads and upserts the current rate per (metal, purity)
- PricingEngine turns a product's physical attributes into a sale price
- PriceRecalculationService reprices products when a rate changes
"""

import logging
from decimal import Decimal
from typing import Dict, Optional

from django.conf import settings
from django.db import transaction

from apps.core.exceptions import InvalidInput, InvalidPurity, InvalidRate, RateNotFound
from apps.core.money import ZERO, Number, round_rupees, to_decimal
from apps.pricing.models import MetalRate

logger = logging.getLogger(__name__)


def validate_metal_purity(metal, purity=None):
    """
    Validate and canonicalize a (metal, purity) pair.

    Returns:
        Tuple (metal, purity) in storage form

    Raises:
        InvalidInput: Unknown metal
        InvalidPurity: Gold without a purity from the closed set
    """
    metal, purity = MetalRate.normalize_key(metal, purity)
    if metal not in (MetalRate.GOLD, MetalRate.SILVER):
        raise InvalidInput(f"Unknown metal '{metal}'")
    if metal == MetalRate.GOLD and purity not in MetalRate.GOLD_PURITIES:
        raise InvalidPurity(
            f"Gold purity must be one of {', '.join(MetalRate.GOLD_PURITIES)}"
        )
    return metal, purity


class RateStore:
    """Current price-per-gram lookup and administrative upsert."""

    def get_rate(self, metal: str, purity: Optional[str] = None) -> Decimal:
        """
        Get the current rate per gram.

        Raises:
            RateNotFound: If no rate has been set for the pair
        """
        metal, purity = validate_metal_purity(metal, purity)
        rate = (
            MetalRate.objects.filter(metal=metal, purity=purity)
            .values_list("price_per_gram", flat=True)
            .first()
        )
        if rate is None:
            label = f"{metal} {purity}".strip()
            raise RateNotFound(f"No rate set for {label}")
        return rate

    def set_rate(self, metal: str, price: Number, purity: Optional[str] = None) -> MetalRate:
        """
        Upsert the rate for a (metal, purity) pair.

        Raises:
            InvalidRate: If price is not a positive number
        """
        metal, purity = validate_metal_purity(metal, purity)
        try:
            price = to_decimal(price, "price", allow_negative=True)
        except InvalidInput:
            raise InvalidRate("Invalid price")
        if price <= 0:
            raise InvalidRate("Price must be a positive number")

        rate, created = MetalRate.objects.update_or_create(
            metal=metal, purity=purity, defaults={"price_per_gram": price}
        )
        logger.info(
            "Rate %s for %s %s: %s/g", "created" if created else "updated", metal, purity, price
        )
        return rate

    def list_rates(self):
        return MetalRate.objects.all()


class PricingEngine:
    """
    Computes a jewellery item's sale price from the current metal rate.

    price = round(weight * rate * (1 + wastage% / 100) + making + stone)

    Arithmetic is done in Decimal and rounded half-up to whole rupees.
    """

    def __init__(self, rate_store: Optional[RateStore] = None):
        self.rate_store = rate_store or RateStore()

    def _resolve_rate(self, metal, purity, weight):
        try:
            return self.rate_store.get_rate(metal, purity)
        except RateNotFound:
            # Weightless items (pure making/stone charge) never need a rate.
            if weight == 0 or getattr(settings, "MISSING_RATE_AS_ZERO", False):
                return ZERO
            raise

    def price_breakdown(
        self,
        metal: str,
        weight_grams: Number,
        wastage_percent: Number = 0,
        making_charge: Number = 0,
        stone_price: Number = 0,
        purity: Optional[str] = None,
    ) -> Dict[str, Decimal]:
        """
        Calculate the price with its intermediate amounts.

        Returns:
            Dict with price breakdown:
            {
                'rate_per_gram': Decimal,
                'base_value': Decimal,
                'wastage_amount': Decimal,
                'making_charge': Decimal,
                'stone_price': Decimal,
                'total_price': Decimal (whole rupees)
            }

        Raises:
            InvalidInput: Negative or non-numeric amounts, unknown metal
            InvalidPurity: Gold with missing or unknown purity
            RateNotFound: No rate for the pair (see MISSING_RATE_AS_ZERO)
        """
        weight = to_decimal(weight_grams, "weight")
        wastage = to_decimal(wastage_percent, "wastage")
        making = to_decimal(making_charge, "making charge")
        stone = to_decimal(stone_price, "stone price")
        metal, purity = validate_metal_purity(metal, purity)

        rate = self._resolve_rate(metal, purity, weight)
        base = weight * rate
        wastage_amount = base * wastage / Decimal("100")
        total = round_rupees(base + wastage_amount + making + stone)

        return {
            "rate_per_gram": rate,
            "base_value": base,
            "wastage_amount": wastage_amount,
            "making_charge": making,
            "stone_price": stone,
            "total_price": total,
        }

    def compute_price(
        self,
        metal: str,
        weight_grams: Number,
        wastage_percent: Number = 0,
        making_charge: Number = 0,
        stone_price: Number = 0,
        purity: Optional[str] = None,
    ) -> int:
        """Calculate the sale price in whole rupees."""
        breakdown = self.price_breakdown(
            metal,
            weight_grams,
            wastage_percent=wastage_percent,
            making_charge=making_charge,
            stone_price=stone_price,
            purity=purity,
        )
        return int(breakdown["total_price"])

    def price_for_product(self, product) -> int:
        return self.compute_price(
            product.metal,
            product.weight_grams,
            wastage_percent=product.wastage_percent,
            making_charge=product.making_charge,
            stone_price=product.stone_price,
            purity=product.purity,
        )


class PriceRecalculationService:
    """
    Reprices catalog products when the rate for their metal changes.
    """

    def __init__(self, engine: Optional[PricingEngine] = None):
        self.engine = engine or PricingEngine()

    @transaction.atomic
    def recalculate_for_rate(self, metal: str, purity: Optional[str] = None) -> int:
        """
        Recalculate prices for products priced off the given rate.

        Silver products all share one rate; gold products are matched on
        purity as well.

        Returns:
            Number of products whose price changed
        """
        # Import here to avoid circular imports
        from apps.inventory.models import Product

        metal, purity = validate_metal_purity(metal, purity)
        products = Product.objects.select_for_update().filter(metal=metal)
        if metal == MetalRate.GOLD:
            products = products.filter(purity=purity)

        updated = 0
        for product in products:
            new_price = Decimal(self.engine.price_for_product(product))
            if product.price != new_price:
                product.price = new_price
                product.save(update_fields=["price", "updated_at"])
                updated += 1

        logger.info("Repriced %d %s %s products", updated, metal, purity)
        return updated


def update_rate(metal: str, price: Number, purity: Optional[str] = None):
    """
    Administrative rate update: upsert the rate, then reprice its products.

    Returns:
        Tuple (MetalRate, updated product count). The count is None when
        recalculation was dispatched to Celery (PRICE_RECALCULATION_ASYNC).
    """
    rate = RateStore().set_rate(metal, price, purity=purity)

    if getattr(settings, "PRICE_RECALCULATION_ASYNC", False):
        from apps.pricing.tasks import recalculate_product_prices

        transaction.on_commit(
            lambda: recalculate_product_prices.delay(rate.metal, rate.purity or None)
        )
        return rate, None

    updated = PriceRecalculationService().recalculate_for_rate(rate.metal, rate.purity or None)
    return rate, updated
